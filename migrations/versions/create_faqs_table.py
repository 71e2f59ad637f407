"""Create faqs table

Revision ID: create_faqs_table
Revises: 
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'create_faqs_table'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'faqs',
        sa.Column('id', sa.String(32), nullable=False),
        sa.Column('question', sa.Text(), nullable=False),
        sa.Column('answer', sa.Text(), nullable=False),
        sa.Column('translations', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_faqs_created_at', 'faqs', ['created_at'])


def downgrade():
    op.drop_index('ix_faqs_created_at', table_name='faqs')
    op.drop_table('faqs')
