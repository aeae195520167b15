from pydantic import BaseModel, Field, field_validator, model_validator

from survey_platform.domain.question_types import QuestionType


class SurveyCreate(BaseModel):
    title: str = Field(min_length=3, max_length=255)
    description: str = Field(default="", max_length=1000)

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class QuestionCreate(BaseModel):
    question_text: str = Field(min_length=1, max_length=1000)
    question_type: QuestionType
    is_required: bool = False
    options: list[str] = Field(default_factory=list)

    @field_validator("question_text", mode="before")
    @classmethod
    def strip_question(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("options", mode="after")
    @classmethod
    def drop_blank_options(cls, value: list[str]) -> list[str]:
        cleaned = [option.strip() for option in value if option.strip()]
        for option in cleaned:
            if len(option) > 255:
                raise ValueError("Option text is too long (max 255 characters)")
        return cleaned

    @model_validator(mode="after")
    def choice_questions_need_options(self) -> "QuestionCreate":
        if self.question_type.has_options:
            if len(self.options) < 2:
                raise ValueError("Add at least 2 answer options")
        else:
            self.options = []
        return self
