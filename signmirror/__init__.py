from signmirror.comparator import compare_motion
from signmirror.feedback import generate_feedback
from signmirror.models import ComparisonResult, Feedback, RawFrame, ReferenceDocument
