"""
Name: Volunteer Feedback Use Case

Responsibilities:
  - Record a 1-5 rating with feedback text for a volunteer
  - Keep the running average rating current

Constraints:
  - Ratings are whole numbers; 4.5 is rejected, not rounded
  - The append happens in the store, so concurrent submissions all count
"""

from dataclasses import dataclass
from uuid import UUID

from ...domain.entities import Role
from ...domain.repositories import IdentityRepository
from .identity_results import FeedbackResult, identity_not_found, validation

MIN_RATING = 1
MAX_RATING = 5


@dataclass
class SubmitFeedbackInput:
    volunteer_id: UUID
    rating: int | float | None
    feedback: str | None


class SubmitFeedbackUseCase:
    """R: Public feedback on a volunteer."""

    def __init__(self, repository: IdentityRepository):
        self.repository = repository

    def execute(self, input_data: SubmitFeedbackInput) -> FeedbackResult:
        rating = input_data.rating
        if (
            rating is None
            or isinstance(rating, bool)
            or not MIN_RATING <= rating <= MAX_RATING
            or rating != int(rating)
        ):
            return FeedbackResult(
                error=validation("Please provide a valid rating between 1 and 5")
            )
        text = (input_data.feedback or "").strip()
        if not text:
            return FeedbackResult(error=validation("Please provide feedback text"))

        updated = self.repository.add_feedback(input_data.volunteer_id, int(rating), text)
        if updated is None:
            return FeedbackResult(error=identity_not_found(Role.VOLUNTEER))
        return FeedbackResult(volunteer=updated)
