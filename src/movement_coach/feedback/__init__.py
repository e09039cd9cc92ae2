from .form_feedback import (
    FeedbackType,
    FeedbackGenerator,
    FormMistake,
    MistakeType,
    make_mistake,
    primary_mistake,
    scaled_severity,
    feedback_type_for_severity,
)

__all__ = [
    'FeedbackType',
    'FeedbackGenerator',
    'FormMistake',
    'MistakeType',
    'make_mistake',
    'primary_mistake',
    'scaled_severity',
    'feedback_type_for_severity',
]
