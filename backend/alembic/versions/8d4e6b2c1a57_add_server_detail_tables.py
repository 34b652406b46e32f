"""add configurations, authentication, capabilities and prerequisites tables

Revision ID: 8d4e6b2c1a57
Revises: 3f1c2a9e7b10
Create Date: 2026-09-15 16:40:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8d4e6b2c1a57'
down_revision: Union[str, None] = '3f1c2a9e7b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _server_fk() -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(['server_id'], ['servers.server_id'], ondelete='CASCADE')


def upgrade() -> None:
    # Create configurations table (runtime/transport descriptors)
    op.create_table('configurations',
        sa.Column('config_id', sa.String(length=64), nullable=False),
        sa.Column('server_id', sa.String(length=64), nullable=False),
        sa.Column('runtime', sa.String(length=32), nullable=True),
        sa.Column('transport', sa.String(length=16), nullable=False),
        sa.Column('mode', sa.String(length=16), nullable=True),
        sa.Column('installation_type', sa.String(length=16), nullable=True),
        sa.Column('installation_package', sa.String(length=255), nullable=True),
        sa.Column('installation_version', sa.String(length=64), nullable=True),
        sa.Column('installation_command', sa.Text(), nullable=True),
        sa.Column('installation_data', sa.JSON(), nullable=True),
        sa.Column('execution_command', sa.Text(), nullable=True),
        sa.Column('execution_args', sa.JSON(), nullable=True),
        sa.Column('working_directory', sa.String(length=512), nullable=True),
        sa.Column('timeout_ms', sa.Integer(), nullable=True),
        sa.Column('execution_data', sa.JSON(), nullable=True),
        sa.Column('connection_base_url', sa.String(length=512), nullable=True),
        sa.Column('connection_endpoint', sa.String(length=512), nullable=True),
        sa.Column('connection_method', sa.String(length=16), nullable=True),
        sa.Column('connection_protocol_version', sa.String(length=32), nullable=True),
        sa.Column('connection_timeout_ms', sa.Integer(), nullable=True),
        sa.Column('connection_data', sa.JSON(), nullable=True),
        sa.Column('system_requirements', sa.JSON(), nullable=True),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('recommended_for', sa.JSON(), nullable=True),
        sa.Column('priority', sa.Integer(), nullable=True, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
        sa.CheckConstraint("transport IN ('stdio', 'sse', 'http')", name='ck_configurations_transport'),
        sa.CheckConstraint("mode IS NULL OR mode IN ('local', 'remote')", name='ck_configurations_mode'),
        _server_fk(),
        sa.PrimaryKeyConstraint('config_id')
    )
    with op.batch_alter_table('configurations', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_configurations_server_id'), ['server_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_configurations_runtime'), ['runtime'], unique=False)
        batch_op.create_index(batch_op.f('ix_configurations_transport'), ['transport'], unique=False)

    op.create_table('environment_variables',
        sa.Column('env_var_id', sa.String(length=64), nullable=False),
        sa.Column('config_id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('required', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('validation_regex', sa.String(length=512), nullable=True),
        sa.Column('help_url', sa.String(length=512), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['config_id'], ['configurations.config_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('env_var_id'),
        sa.UniqueConstraint('config_id', 'name', name='uq_environment_variables_config_name')
    )
    with op.batch_alter_table('environment_variables', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_environment_variables_config_id'), ['config_id'], unique=False)

    # Create authentication_configs table (config_data shape depends on auth_type)
    op.create_table('authentication_configs',
        sa.Column('auth_id', sa.String(length=64), nullable=False),
        sa.Column('server_id', sa.String(length=64), nullable=False),
        sa.Column('auth_type', sa.String(length=16), nullable=False),
        sa.Column('priority', sa.Integer(), nullable=True, server_default='1'),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('required', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('recommended', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('display_name', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('config_data', sa.Text(), nullable=False, server_default='{}'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
        sa.CheckConstraint(
            "auth_type IN ('none', 'api_key', 'oauth2', 'custom', 'multiple')",
            name='ck_authentication_configs_auth_type',
        ),
        _server_fk(),
        sa.PrimaryKeyConstraint('auth_id')
    )
    with op.batch_alter_table('authentication_configs', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_authentication_configs_server_id'), ['server_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_authentication_configs_auth_type'), ['auth_type'], unique=False)
        batch_op.create_index('idx_auth_configs_priority', ['server_id', 'priority'], unique=False)

    # Create capability tables
    op.create_table('tools',
        sa.Column('tool_id', sa.String(length=64), nullable=False),
        sa.Column('server_id', sa.String(length=64), nullable=False),
        sa.Column('tool_name', sa.String(length=255), nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('input_schema', sa.JSON(), nullable=False),
        sa.Column('requires_auth', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('min_auth_scopes', sa.JSON(), nullable=True),
        sa.Column('rate_limit_data', sa.JSON(), nullable=True),
        sa.Column('examples', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
        _server_fk(),
        sa.PrimaryKeyConstraint('tool_id'),
        sa.UniqueConstraint('server_id', 'tool_name', name='uq_tools_server_tool_name')
    )
    with op.batch_alter_table('tools', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_tools_server_id'), ['server_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_tools_tool_name'), ['tool_name'], unique=False)
        batch_op.create_index(batch_op.f('ix_tools_requires_auth'), ['requires_auth'], unique=False)

    op.create_table('resources',
        sa.Column('resource_id', sa.String(length=64), nullable=False),
        sa.Column('server_id', sa.String(length=64), nullable=False),
        sa.Column('uri_template', sa.String(length=512), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('mime_type', sa.String(length=128), nullable=True),
        sa.Column('requires_auth', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('access_level', sa.String(length=32), nullable=True),
        sa.Column('examples', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
        _server_fk(),
        sa.PrimaryKeyConstraint('resource_id')
    )
    with op.batch_alter_table('resources', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_resources_server_id'), ['server_id'], unique=False)

    op.create_table('prompts',
        sa.Column('prompt_id', sa.String(length=64), nullable=False),
        sa.Column('server_id', sa.String(length=64), nullable=False),
        sa.Column('prompt_name', sa.String(length=255), nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('arguments_schema', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
        _server_fk(),
        sa.PrimaryKeyConstraint('prompt_id'),
        sa.UniqueConstraint('server_id', 'prompt_name', name='uq_prompts_server_prompt_name')
    )
    with op.batch_alter_table('prompts', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_prompts_server_id'), ['server_id'], unique=False)

    # Create installation_prerequisites table
    op.create_table('installation_prerequisites',
        sa.Column('prerequisite_id', sa.String(length=64), nullable=False),
        sa.Column('server_id', sa.String(length=64), nullable=False),
        sa.Column('prerequisite_type', sa.String(length=16), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('version', sa.String(length=64), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('check_command', sa.Text(), nullable=True),
        sa.Column('install_url', sa.String(length=512), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
        sa.CheckConstraint(
            "prerequisite_type IN ('runtime', 'credential', 'system', 'network')",
            name='ck_installation_prerequisites_type',
        ),
        _server_fk(),
        sa.PrimaryKeyConstraint('prerequisite_id')
    )
    with op.batch_alter_table('installation_prerequisites', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_installation_prerequisites_server_id'), ['server_id'], unique=False)
        batch_op.create_index(
            batch_op.f('ix_installation_prerequisites_prerequisite_type'), ['prerequisite_type'], unique=False
        )


def downgrade() -> None:
    op.drop_table('installation_prerequisites')
    op.drop_table('prompts')
    op.drop_table('resources')
    op.drop_table('tools')
    op.drop_table('authentication_configs')
    op.drop_table('environment_variables')
    op.drop_table('configurations')
