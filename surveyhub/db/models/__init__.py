from .user import User
from .survey import Survey
from .question import Question, QuestionType, QuestionOption
from .response import Response
from .answer import Answer
