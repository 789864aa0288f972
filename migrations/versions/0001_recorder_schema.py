# migrations/versions/0001_recorder_schema.py — Alembic (si tu utilises flask-migrate)
from alembic import op
import sqlalchemy as sa

revision = '0001_recorder_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'folder',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('folder.id'), nullable=True),
        sa.Column('cloud_path', sa.String(length=600), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_folder_name', 'folder', ['name'])
    op.create_index('ix_folder_parent_id', 'folder', ['parent_id'])

    op.create_table(
        'media_file',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('mime_type', sa.String(length=120), nullable=False),
        sa.Column('size', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('media_type', sa.String(length=40), nullable=False),
        sa.Column('public_id', sa.String(length=255), nullable=False),
        sa.Column('url', sa.String(length=600), nullable=False),
        sa.Column('folder_id', sa.Integer(), sa.ForeignKey('folder.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_media_file_folder_id', 'media_file', ['folder_id'])

    op.create_table(
        'sheet',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_table(
        'sheet_cell',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sheet_id', sa.Integer(), sa.ForeignKey('sheet.id'), nullable=False),
        sa.Column('row_no', sa.Integer(), nullable=False),
        sa.Column('col_no', sa.Integer(), nullable=False),
        sa.Column('value', sa.JSON(), nullable=True),
        sa.Column('bold', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.UniqueConstraint('sheet_id', 'row_no', 'col_no', name='uq_sheet_cell_pos'),
    )
    op.create_index('ix_sheet_cell_sheet_id', 'sheet_cell', ['sheet_id'])
    op.create_table(
        'sheet_column',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sheet_id', sa.Integer(), sa.ForeignKey('sheet.id'), nullable=False),
        sa.Column('col_no', sa.Integer(), nullable=False),
        sa.Column('width', sa.Integer(), nullable=False),
        sa.UniqueConstraint('sheet_id', 'col_no', name='uq_sheet_column_col'),
    )
    op.create_index('ix_sheet_column_sheet_id', 'sheet_column', ['sheet_id'])


def downgrade():
    op.drop_index('ix_sheet_column_sheet_id', table_name='sheet_column')
    op.drop_table('sheet_column')
    op.drop_index('ix_sheet_cell_sheet_id', table_name='sheet_cell')
    op.drop_table('sheet_cell')
    op.drop_table('sheet')
    op.drop_index('ix_media_file_folder_id', table_name='media_file')
    op.drop_table('media_file')
    op.drop_index('ix_folder_parent_id', table_name='folder')
    op.drop_index('ix_folder_name', table_name='folder')
    op.drop_table('folder')
