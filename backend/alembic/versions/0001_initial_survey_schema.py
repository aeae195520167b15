"""initial survey schema

Revision ID: 0001_initial_survey
Revises:
Create Date: 2026-10-19 09:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial_survey"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    metadata = sa.MetaData()

    users = sa.Table(
        "users",
        metadata,
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
    )

    surveys = sa.Table(
        "surveys",
        metadata,
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
    )

    questions = sa.Table(
        "questions",
        metadata,
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("survey_id", sa.Integer(), sa.ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False),
        sa.Column("question_text", sa.Text(), nullable=False),
        sa.Column("question_type", sa.String(length=20), nullable=False),
        sa.Column("is_required", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("order_number", sa.Integer(), nullable=False, server_default="1"),
    )

    question_options = sa.Table(
        "question_options",
        metadata,
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("question_id", sa.Integer(), sa.ForeignKey("questions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("option_text", sa.String(length=255), nullable=False),
        sa.Column("order_number", sa.Integer(), nullable=False, server_default="1"),
    )

    survey_responses = sa.Table(
        "survey_responses",
        metadata,
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("survey_id", sa.Integer(), sa.ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
    )

    question_answers = sa.Table(
        "question_answers",
        metadata,
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "response_id", sa.Integer(), sa.ForeignKey("survey_responses.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("question_id", sa.Integer(), sa.ForeignKey("questions.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "option_id", sa.Integer(), sa.ForeignKey("question_options.id", ondelete="CASCADE"), nullable=True
        ),
        sa.Column("answer_text", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
    )

    for table in (users, surveys, questions, question_options, survey_responses, question_answers):
        table.create(bind, checkfirst=True)

    op.create_index("ix_surveys_user_id", "surveys", ["user_id"])
    op.create_index("ix_questions_survey_id", "questions", ["survey_id"])
    op.create_index("ix_question_options_question_id", "question_options", ["question_id"])
    op.create_index("ix_survey_responses_survey_user", "survey_responses", ["survey_id", "user_id"])
    op.create_index("ix_question_answers_question_id", "question_answers", ["question_id"])


def downgrade() -> None:
    op.drop_index("ix_question_answers_question_id", table_name="question_answers")
    op.drop_index("ix_survey_responses_survey_user", table_name="survey_responses")
    op.drop_index("ix_question_options_question_id", table_name="question_options")
    op.drop_index("ix_questions_survey_id", table_name="questions")
    op.drop_index("ix_surveys_user_id", table_name="surveys")

    op.execute("DROP TABLE IF EXISTS question_answers")
    op.execute("DROP TABLE IF EXISTS survey_responses")
    op.execute("DROP TABLE IF EXISTS question_options")
    op.execute("DROP TABLE IF EXISTS questions")
    op.execute("DROP TABLE IF EXISTS surveys")
    op.execute("DROP TABLE IF EXISTS users")
