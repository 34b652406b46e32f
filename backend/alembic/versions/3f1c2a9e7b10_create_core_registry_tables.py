"""create authors, servers and domain_mappings tables

Revision ID: 3f1c2a9e7b10
Revises:
Create Date: 2026-09-14 10:12:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9e7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create authors table
    op.create_table('authors',
        sa.Column('author_id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('url', sa.String(length=512), nullable=True),
        sa.Column('verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('author_id')
    )
    with op.batch_alter_table('authors', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_authors_verified'), ['verified'], unique=False)

    # Create servers table
    op.create_table('servers',
        sa.Column('server_id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('version', sa.String(length=64), nullable=False),
        sa.Column('author_id', sa.String(length=64), nullable=True),
        sa.Column('repository_type', sa.String(length=32), nullable=True),
        sa.Column('repository_url', sa.String(length=512), nullable=True),
        sa.Column('repository_directory', sa.String(length=512), nullable=True),
        sa.Column('deployment_type', sa.String(length=16), nullable=False),
        sa.Column('trust_level', sa.String(length=16), nullable=False, server_default='unverified'),
        sa.Column('categories', sa.JSON(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('popularity_score', sa.Integer(), nullable=True, server_default='0'),
        sa.Column('install_count', sa.Integer(), nullable=True, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
        sa.Column('last_updated', sa.String(length=64), nullable=True),
        sa.CheckConstraint("deployment_type IN ('local', 'remote', 'hybrid')", name='ck_servers_deployment_type'),
        sa.CheckConstraint("trust_level IN ('verified', 'community', 'unverified')", name='ck_servers_trust_level'),
        sa.ForeignKeyConstraint(['author_id'], ['authors.author_id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('server_id')
    )
    with op.batch_alter_table('servers', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_servers_author_id'), ['author_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_servers_deployment_type'), ['deployment_type'], unique=False)
        batch_op.create_index(batch_op.f('ix_servers_trust_level'), ['trust_level'], unique=False)
        batch_op.create_index(batch_op.f('ix_servers_popularity_score'), ['popularity_score'], unique=False)

    # Create domain_mappings table
    op.create_table('domain_mappings',
        sa.Column('mapping_id', sa.String(length=64), nullable=False),
        sa.Column('server_id', sa.String(length=64), nullable=False),
        sa.Column('domain_pattern', sa.String(length=253), nullable=False),
        sa.Column('match_type', sa.String(length=16), nullable=False),
        sa.Column('priority', sa.Integer(), nullable=True, server_default='1'),
        sa.Column('context_requirements', sa.JSON(), nullable=True),
        sa.Column('auto_suggest', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('auto_install', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('sub_patterns', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
        sa.CheckConstraint("match_type IN ('exact', 'wildcard', 'regex')", name='ck_domain_mappings_match_type'),
        sa.ForeignKeyConstraint(['server_id'], ['servers.server_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('mapping_id')
    )
    with op.batch_alter_table('domain_mappings', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_domain_mappings_server_id'), ['server_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_domain_mappings_domain_pattern'), ['domain_pattern'], unique=False)
        batch_op.create_index(batch_op.f('ix_domain_mappings_priority'), ['priority'], unique=False)
        batch_op.create_index(batch_op.f('ix_domain_mappings_auto_suggest'), ['auto_suggest'], unique=False)


def downgrade() -> None:
    op.drop_table('domain_mappings')
    op.drop_table('servers')
    op.drop_table('authors')
