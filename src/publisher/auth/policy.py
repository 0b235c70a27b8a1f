"""Resource-level access rules.

Learn: role gates answer "may this kind of user call this route?";
these checks answer "may this user touch this particular row?". They
run per request against freshly loaded rows and are never cached.
Ownership is literal: no role, admin included, overrides it.
"""

from publisher.auth.dependencies import CurrentIdentity
from publisher.db.models import RoleKind, Translation, TranslationStatus, Work
from publisher.errors import Forbidden, ValidationFailed


def ensure_work_owner(
    work: Work,
    identity: CurrentIdentity,
    message: str = "Not authorized to edit this work",
) -> None:
    if work.author_id != identity.user_id:
        raise Forbidden(message)


# Who may move a translation from one status to the next.
_TRANSLATOR_STEPS = {
    (TranslationStatus.PENDING, TranslationStatus.IN_PROGRESS),
    (TranslationStatus.IN_PROGRESS, TranslationStatus.COMPLETED),
}
_OWNER_STEPS = {
    (TranslationStatus.COMPLETED, TranslationStatus.APPROVED),
    (TranslationStatus.COMPLETED, TranslationStatus.REJECTED),
}


def ensure_translation_transition(
    translation: Translation,
    work: Work,
    target: TranslationStatus,
    identity: CurrentIdentity,
) -> None:
    """Check that `identity` may move `translation` to `target`.

    Translator steps belong to the assigned translator. An unassigned
    pending request can be claimed by any caller holding the translator
    role. Review steps belong to the work's owner.
    """
    step = (TranslationStatus(translation.status), target)

    if step in _TRANSLATOR_STEPS:
        if translation.translator_id is None:
            if identity.role != RoleKind.TRANSLATOR.value:
                raise Forbidden("Only translators can claim a translation")
            return
        if translation.translator_id != identity.user_id:
            raise Forbidden("Not the assigned translator")
        return

    if step in _OWNER_STEPS:
        ensure_work_owner(work, identity, "Only the author can review this translation")
        return

    raise ValidationFailed(
        f"Cannot move a translation from {step[0].value} to {target.value}",
        error="Invalid status transition",
    )
