"""Services package — expose all concrete services from one import."""
from .quiz_service import QuizService

__all__ = [
    'QuizService',
]
