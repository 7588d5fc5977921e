"""Recipes, shopping lists and shopping items with auto-add tracking

Revision ID: 3b7d2e91c4a0
Revises:
Create Date: 2026-10-19 09:12:41.518203

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3b7d2e91c4a0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'recipe',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('household_id', sa.String(length=64), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('ingredients', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('recipe', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_recipe_household_id'), ['household_id'], unique=False)

    op.create_table(
        'shopping_list',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('household_id', sa.String(length=64), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('created_by', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('total_items', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('completed_items', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('household_id', 'title', name='uq_shopping_list_household_title'),
    )
    with op.batch_alter_table('shopping_list', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_shopping_list_household_id'), ['household_id'], unique=False)

    op.create_table(
        'shopping_item',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('list_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('quantity', sa.String(length=50), nullable=False, server_default='1'),
        sa.Column('is_complete', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('auto_added', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('pending_confirmation', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('source_recipe_id', sa.Integer(), nullable=True),
        sa.Column('auto_added_at', sa.DateTime(), nullable=True),
        sa.Column('created_by', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('NOT pending_confirmation OR auto_added', name='ck_shopping_item_pending_requires_auto_added'),
        sa.ForeignKeyConstraint(['list_id'], ['shopping_list.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['source_recipe_id'], ['recipe.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('shopping_item', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_shopping_item_list_id'), ['list_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_shopping_item_is_complete'), ['is_complete'], unique=False)
        batch_op.create_index(batch_op.f('ix_shopping_item_pending_confirmation'), ['pending_confirmation'], unique=False)


def downgrade():
    with op.batch_alter_table('shopping_item', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_shopping_item_pending_confirmation'))
        batch_op.drop_index(batch_op.f('ix_shopping_item_is_complete'))
        batch_op.drop_index(batch_op.f('ix_shopping_item_list_id'))
    op.drop_table('shopping_item')

    with op.batch_alter_table('shopping_list', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_shopping_list_household_id'))
    op.drop_table('shopping_list')

    with op.batch_alter_table('recipe', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_recipe_household_id'))
    op.drop_table('recipe')
