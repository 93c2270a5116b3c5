from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "2026_10_01_create_lightbnb_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password", sa.String(255), nullable=False),
    )
    op.create_table(
        "properties",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("owner_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("thumbnail_photo_url", sa.String(255), nullable=False),
        sa.Column("cover_photo_url", sa.String(255), nullable=False),
        # cents
        sa.Column("cost_per_night", sa.Integer, nullable=False, server_default="0"),
        sa.Column("parking_spaces", sa.Integer, nullable=False, server_default="0"),
        sa.Column("number_of_bathrooms", sa.Integer, nullable=False, server_default="0"),
        sa.Column("number_of_bedrooms", sa.Integer, nullable=False, server_default="0"),
        sa.Column("country", sa.String(255), nullable=False),
        sa.Column("street", sa.String(255), nullable=False),
        sa.Column("city", sa.String(255), nullable=False),
        sa.Column("province", sa.String(255), nullable=False),
        sa.Column("post_code", sa.String(255), nullable=False),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
    )
    op.create_index("properties_city_idx", "properties", ["city"])
    op.create_index("properties_cost_idx", "properties", ["cost_per_night"])
    op.create_table(
        "reservations",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("property_id", sa.Integer, sa.ForeignKey("properties.id", ondelete="CASCADE"), nullable=False),
        sa.Column("guest_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    )
    op.create_index("reservations_guest_idx", "reservations", ["guest_id"])
    op.create_table(
        "property_reviews",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("guest_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("property_id", sa.Integer, sa.ForeignKey("properties.id", ondelete="CASCADE"), nullable=False),
        sa.Column("reservation_id", sa.Integer, sa.ForeignKey("reservations.id", ondelete="CASCADE"), nullable=False),
        sa.Column("rating", sa.SmallInteger, nullable=False),
        sa.Column("message", sa.Text),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="property_reviews_rating_range"),
    )
    op.create_index("property_reviews_property_idx", "property_reviews", ["property_id"])


def downgrade():
    op.drop_table("property_reviews")
    op.drop_table("reservations")
    op.drop_index("properties_cost_idx", "properties")
    op.drop_index("properties_city_idx", "properties")
    op.drop_table("properties")
    op.drop_table("users")
