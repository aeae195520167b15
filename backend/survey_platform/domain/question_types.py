from enum import Enum


class QuestionType(str, Enum):
    radio = "radio"
    checkbox = "checkbox"
    text = "text"
    textarea = "textarea"

    @property
    def has_options(self) -> bool:
        return self in (QuestionType.radio, QuestionType.checkbox)

    @property
    def label(self) -> str:
        return QUESTION_TYPE_LABELS[self]


QUESTION_TYPE_LABELS = {
    QuestionType.radio: "Single choice",
    QuestionType.checkbox: "Multiple choice",
    QuestionType.text: "Short text",
    QuestionType.textarea: "Long text",
}
