# migrations/versions/001_initial_migration.py

"""Initial migration with all tables

Revision ID: 001
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def _moderation_flags():
    return [
        sa.Column('visibility', sa.String(), server_default='PUBLIC', nullable=False),
        sa.Column('sensitive_content', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('moderated', sa.Boolean(), server_default='false', nullable=False),
    ]


def upgrade() -> None:
    # Users (also the PROFILE moderation target)
    op.create_table('auth_users',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('name', sa.String(), nullable=True),
                    sa.Column('email', sa.String(), nullable=True),
                    sa.Column('role', sa.String(), server_default='USER', nullable=False),
                    sa.Column('permissions', sa.JSON(), server_default='[]', nullable=False),
                    sa.Column('status', sa.String(), server_default='ACTIVE', nullable=False),
                    sa.Column('suspended_until', sa.DateTime(timezone=True), nullable=True),
                    sa.Column('ban_reason', sa.Text(), nullable=True),
                    sa.Column('banned_at', sa.DateTime(timezone=True), nullable=True),
                    sa.Column('notification_preferences', sa.Text(), nullable=True),
                    sa.Column('bio', sa.Text(), nullable=True),
                    sa.Column('profile_verified', sa.Boolean(), server_default='false', nullable=False),
                    sa.Column('profile_status', sa.String(), server_default='PENDING', nullable=False),
                    sa.Column('profile_visibility', sa.String(), server_default='PUBLIC', nullable=False),
                    sa.Column('moderated', sa.Boolean(), server_default='false', nullable=False),
                    *_timestamps(),
                    sa.PrimaryKeyConstraint('id'),
                    )
    op.create_index(op.f('ix_auth_users_email'), 'auth_users', ['email'])
    op.create_index(op.f('ix_auth_users_role'), 'auth_users', ['role'])

    # Forum
    op.create_table('forum_posts',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('author_id', sa.String(), nullable=True),
                    sa.Column('title', sa.String(), nullable=True),
                    sa.Column('content', sa.Text(), nullable=True),
                    sa.Column('published', sa.Boolean(), server_default='false', nullable=False),
                    sa.Column('status', sa.String(), server_default='PENDING', nullable=False),
                    *_moderation_flags(),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['author_id'], ['auth_users.id']),
                    sa.PrimaryKeyConstraint('id'),
                    )
    op.create_index(op.f('ix_forum_posts_author_id'), 'forum_posts', ['author_id'])

    op.create_table('forum_comments',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('author_id', sa.String(), nullable=True),
                    sa.Column('post_id', sa.String(), nullable=True),
                    sa.Column('content', sa.Text(), nullable=True),
                    sa.Column('visible', sa.Boolean(), server_default='true', nullable=False),
                    sa.Column('status', sa.String(), server_default='PENDING', nullable=False),
                    *_moderation_flags(),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['author_id'], ['auth_users.id']),
                    sa.ForeignKeyConstraint(['post_id'], ['forum_posts.id']),
                    sa.PrimaryKeyConstraint('id'),
                    )
    op.create_index(op.f('ix_forum_comments_author_id'), 'forum_comments', ['author_id'])

    op.create_table('forum_groups',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('owner_id', sa.String(), nullable=True),
                    sa.Column('name', sa.String(), nullable=True),
                    sa.Column('description', sa.Text(), nullable=True),
                    sa.Column('status', sa.String(), server_default='PENDING', nullable=False),
                    sa.Column('moderation_approved', sa.Boolean(), server_default='false', nullable=False),
                    *_moderation_flags(),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['owner_id'], ['auth_users.id']),
                    sa.PrimaryKeyConstraint('id'),
                    )
    op.create_index(op.f('ix_forum_groups_owner_id'), 'forum_groups', ['owner_id'])

    # Marketplace
    op.create_table('marketplace_products',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('seller_id', sa.String(), nullable=True),
                    sa.Column('name', sa.String(), nullable=True),
                    sa.Column('description', sa.Text(), nullable=True),
                    sa.Column('status', sa.String(), server_default='PENDING', nullable=False),
                    sa.Column('moderation_approved', sa.Boolean(), server_default='false', nullable=False),
                    *_moderation_flags(),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['seller_id'], ['auth_users.id']),
                    sa.PrimaryKeyConstraint('id'),
                    )
    op.create_index(op.f('ix_marketplace_products_seller_id'), 'marketplace_products', ['seller_id'])

    # Resources
    op.create_table('resources',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('author_id', sa.String(), nullable=True),
                    sa.Column('type', sa.String(), server_default='ARTICLE', nullable=False),
                    sa.Column('title', sa.String(), nullable=True),
                    sa.Column('description', sa.Text(), nullable=True),
                    sa.Column('content', sa.Text(), nullable=True),
                    sa.Column('published', sa.Boolean(), server_default='false', nullable=False),
                    sa.Column('featured', sa.Boolean(), server_default='false', nullable=False),
                    sa.Column('status', sa.String(), server_default='PENDING', nullable=False),
                    *_moderation_flags(),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['author_id'], ['auth_users.id']),
                    sa.PrimaryKeyConstraint('id'),
                    )
    op.create_index(op.f('ix_resources_author_id'), 'resources', ['author_id'])

    # Events and chat
    op.create_table('events',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('creator_id', sa.String(), nullable=True),
                    sa.Column('title', sa.String(), nullable=True),
                    sa.Column('description', sa.Text(), nullable=True),
                    sa.Column('published', sa.Boolean(), server_default='false', nullable=False),
                    sa.Column('status', sa.String(), server_default='PENDING', nullable=False),
                    *_moderation_flags(),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['creator_id'], ['auth_users.id']),
                    sa.PrimaryKeyConstraint('id'),
                    )
    op.create_index(op.f('ix_events_creator_id'), 'events', ['creator_id'])

    op.create_table('chat_messages',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('sender_id', sa.String(), nullable=True),
                    sa.Column('content', sa.Text(), nullable=True),
                    sa.Column('visible', sa.Boolean(), server_default='true', nullable=False),
                    sa.Column('status', sa.String(), server_default='SENT', nullable=False),
                    *_moderation_flags(),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['sender_id'], ['auth_users.id']),
                    sa.PrimaryKeyConstraint('id'),
                    )
    op.create_index(op.f('ix_chat_messages_sender_id'), 'chat_messages', ['sender_id'])

    # Moderation
    op.create_table('moderation_user_warnings',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('user_id', sa.String(), nullable=False),
                    sa.Column('reason', sa.Text(), nullable=False),
                    sa.Column('warning_level', sa.String(), nullable=False),
                    sa.Column('content_type', sa.String(), nullable=False),
                    sa.Column('content_id', sa.String(), nullable=False),
                    sa.Column('moderator_id', sa.String(), nullable=True),
                    *_timestamps(),
                    sa.PrimaryKeyConstraint('id'),
                    )
    op.create_index(op.f('ix_moderation_user_warnings_user_id'), 'moderation_user_warnings', ['user_id'])
    op.create_index(op.f('ix_moderation_user_warnings_content_id'), 'moderation_user_warnings', ['content_id'])

    op.create_table('notifications',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('user_id', sa.String(), nullable=False),
                    sa.Column('type', sa.String(), nullable=False),
                    sa.Column('title', sa.String(), nullable=False),
                    sa.Column('message', sa.Text(), nullable=False),
                    sa.Column('data', sa.JSON(), nullable=True),
                    sa.Column('read', sa.Boolean(), server_default='false', nullable=False),
                    *_timestamps(),
                    sa.PrimaryKeyConstraint('id'),
                    )
    op.create_index(op.f('ix_notifications_user_id'), 'notifications', ['user_id'])

    op.create_table('moderation_actions',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('moderator_id', sa.String(), nullable=False),
                    sa.Column('action_type', sa.String(), nullable=False),
                    sa.Column('target_user', sa.String(), nullable=False),
                    sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
                    sa.Column('details', sa.JSON(), nullable=False),
                    *_timestamps(),
                    sa.PrimaryKeyConstraint('id'),
                    )
    op.create_index(op.f('ix_moderation_actions_moderator_id'), 'moderation_actions', ['moderator_id'])
    op.create_index(op.f('ix_moderation_actions_target_user'), 'moderation_actions', ['target_user'])

    op.create_table('resource_moderation_logs',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('resource_id', sa.String(), nullable=False),
                    sa.Column('moderator_id', sa.String(), nullable=False),
                    sa.Column('action', sa.String(), nullable=False),
                    sa.Column('reason', sa.Text(), nullable=True),
                    sa.Column('previous_status', sa.String(), nullable=True),
                    sa.Column('batch_id', sa.String(), nullable=True),
                    *_timestamps(),
                    sa.PrimaryKeyConstraint('id'),
                    )
    op.create_index(op.f('ix_resource_moderation_logs_resource_id'), 'resource_moderation_logs', ['resource_id'])
    op.create_index(op.f('ix_resource_moderation_logs_moderator_id'), 'resource_moderation_logs', ['moderator_id'])
    op.create_index(op.f('ix_resource_moderation_logs_batch_id'), 'resource_moderation_logs', ['batch_id'])


def downgrade() -> None:
    op.drop_table('resource_moderation_logs')
    op.drop_table('moderation_actions')
    op.drop_table('notifications')
    op.drop_table('moderation_user_warnings')
    op.drop_table('chat_messages')
    op.drop_table('events')
    op.drop_table('resources')
    op.drop_table('marketplace_products')
    op.drop_table('forum_groups')
    op.drop_table('forum_comments')
    op.drop_table('forum_posts')
    op.drop_table('auth_users')
