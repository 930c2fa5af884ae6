"""create companions, session_history and bookmarks tables

Revision ID: 20260301_0001
Revises:
Create Date: 2026-03-01 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20260301_0001'
down_revision = None
branch_labels = None
depends_on = None


def _base_columns() -> list[sa.Column]:
    return [
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP'),
            comment='When the record was created'
        ),
    ]


def upgrade() -> None:
    """Create the companion library tables with their indexes."""

    op.create_table(
        'companions',
        *_base_columns(),
        sa.Column('name', sa.String(length=255), nullable=False, comment='Companion display name'),
        sa.Column('subject', sa.String(length=100), nullable=False, comment='Subject taught by the companion'),
        sa.Column('topic', sa.String(), nullable=False, comment='Topic the companion helps with'),
        sa.Column('voice', sa.String(length=50), nullable=False, comment='Voice identifier: male, female'),
        sa.Column('style', sa.String(length=50), nullable=False, comment='Delivery style: formal, casual'),
        sa.Column('duration', sa.Integer(), nullable=False, comment='Expected session duration in minutes'),
        sa.Column('author', sa.String(length=255), nullable=False, comment='Identity of the creating user'),
        sa.CheckConstraint('duration >= 1', name='ck_companions_duration_positive'),
    )
    op.create_index('ix_companions_created_at', 'companions', ['created_at'])
    op.create_index('ix_companions_subject', 'companions', ['subject'])
    op.create_index('ix_companions_author', 'companions', ['author'])
    op.create_index('ix_companions_created_at_id', 'companions', ['created_at', 'id'])

    op.create_table(
        'session_history',
        *_base_columns(),
        sa.Column(
            'companion_id',
            sa.Uuid(),
            sa.ForeignKey('companions.id', ondelete='CASCADE'),
            nullable=False,
            comment='Companion the session was held with'
        ),
        sa.Column(
            'user_id',
            sa.String(length=255),
            nullable=False,
            comment='Identity of the user who held the session'
        ),
    )
    op.create_index('ix_session_history_created_at', 'session_history', ['created_at'])
    op.create_index('ix_session_history_companion_id', 'session_history', ['companion_id'])
    op.create_index('ix_session_history_user_id', 'session_history', ['user_id'])
    op.create_index(
        'ix_session_history_user_id_created_at',
        'session_history',
        ['user_id', 'created_at']
    )

    op.create_table(
        'bookmarks',
        *_base_columns(),
        sa.Column(
            'companion_id',
            sa.Uuid(),
            sa.ForeignKey('companions.id', ondelete='CASCADE'),
            nullable=False,
            comment='Bookmarked companion'
        ),
        sa.Column(
            'user_id',
            sa.String(length=255),
            nullable=False,
            comment='Identity of the bookmark owner'
        ),
    )
    op.create_index('ix_bookmarks_created_at', 'bookmarks', ['created_at'])
    op.create_index('ix_bookmarks_companion_id', 'bookmarks', ['companion_id'])
    op.create_index('ix_bookmarks_user_id', 'bookmarks', ['user_id'])
    op.create_index('ix_bookmarks_user_id_companion_id', 'bookmarks', ['user_id', 'companion_id'])


def downgrade() -> None:
    """Drop the companion library tables."""
    op.drop_table('bookmarks')
    op.drop_table('session_history')
    op.drop_table('companions')
