"""Role-dependent views of a serialized quiz."""
import copy

from auth_app.models import PRIVILEGED_ROLES

ANSWER_FIELD = 'correctOptionId'


def redact(quiz_view: dict, viewer_role: str) -> dict:
    """
    Returns the quiz view a viewer with the given role may see.

    Instructors and admins get the view as is. Everyone else gets a deep copy
    without the correct answer on any question; options stay complete so the
    viewer can still choose between them. The input is never modified.
    """
    if viewer_role in PRIVILEGED_ROLES:
        return quiz_view
    view = copy.deepcopy(quiz_view)
    for question in view.get('questions') or []:
        question.pop(ANSWER_FIELD, None)
    return view


def redact_many(quiz_views, viewer_role: str) -> list:
    return [redact(view, viewer_role) for view in quiz_views]
