"""Create the movies table.

- movies (id, name, director)
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c41d7e2a9b0"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "movies",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("director", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_movies"),
    )


def downgrade() -> None:
    op.drop_table("movies")
