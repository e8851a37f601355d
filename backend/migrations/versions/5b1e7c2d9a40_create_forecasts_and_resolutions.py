from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "5b1e7c2d9a40"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        "forecasts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("source", sa.String(length=32), nullable=False),
        sa.Column("target_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("predicted_high", sa.Float(), nullable=False),
        sa.Column("raw_response", sa.Text(), nullable=True),
        sa.Column("captured_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_forecasts_source", "forecasts", ["source"])
    op.create_index("ix_forecasts_target_date", "forecasts", ["target_date"])

    op.create_table(
        "resolutions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("target_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("actual_high", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("target_date", name="uq_resolutions_target_date"),
    )

def downgrade():
    op.drop_table("resolutions")
    op.drop_index("ix_forecasts_target_date", table_name="forecasts")
    op.drop_index("ix_forecasts_source", table_name="forecasts")
    op.drop_table("forecasts")
