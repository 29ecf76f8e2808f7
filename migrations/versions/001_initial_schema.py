"""Initial_KnowledgeHubSchema

Revision ID: 001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LINK_TABLES = [
    ('project_client_links', 'project_id', 'client_id'),
    ('project_method_links', 'project_id', 'method_id'),
    ('project_people_links', 'project_id', 'person_id'),
    ('offer_client_links', 'offer_id', 'client_id'),
    ('offer_method_links', 'offer_id', 'method_id'),
    ('offer_people_links', 'offer_id', 'person_id'),
    ('people_client_links', 'person_id', 'client_id'),
    ('people_method_expertise', 'person_id', 'method_id'),
]


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    ]


def upgrade() -> None:
    op.create_table('users',
    sa.Column('id', sa.String(length=64), nullable=False),
    sa.Column('email', sa.String(length=255), nullable=False),
    sa.Column('display_name', sa.String(length=255), nullable=False),
    sa.Column('picture', sa.String(length=1024), nullable=True),
    sa.Column('locale', sa.String(length=16), nullable=True),
    sa.Column('status', sa.String(length=20), nullable=False),
    *_timestamps(),
    sa.PrimaryKeyConstraint('id', name='pk_users')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table('knowledge_entries',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('title', sa.String(length=255), nullable=False),
    sa.Column('category', sa.Enum('project', 'offer', 'method', 'client', 'person', name='knowledge_category'), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('full_description', sa.Text(), nullable=True),
    sa.Column('tags', sa.JSON(), nullable=True),
    sa.Column('client', sa.String(length=255), nullable=True),
    sa.Column('project_status', sa.Enum('active', 'completed', 'archived', name='project_status'), nullable=True),
    sa.Column('start_date', sa.Date(), nullable=True),
    sa.Column('end_date', sa.Date(), nullable=True),
    sa.Column('date_delivered', sa.Date(), nullable=True),
    sa.Column('learnings', sa.JSON(), nullable=True),
    sa.Column('learnings_text', sa.Text(), nullable=True),
    sa.Column('deliverables', sa.JSON(), nullable=True),
    sa.Column('references_links', sa.JSON(), nullable=True),
    sa.Column('offer_status', sa.Enum('draft', 'pending', 'won', 'lost', name='offer_status'), nullable=True),
    sa.Column('offer_work_status', sa.Enum('under_development', 'delivered', name='offer_work_status'), nullable=True),
    sa.Column('winning_strategy', sa.Text(), nullable=True),
    sa.Column('loss_reasons', sa.Text(), nullable=True),
    sa.Column('win_factors', sa.JSON(), nullable=True),
    sa.Column('loss_factors', sa.JSON(), nullable=True),
    sa.Column('source_drive_link', sa.String(length=1024), nullable=True),
    sa.Column('source_miro_link', sa.String(length=1024), nullable=True),
    sa.Column('field', sa.String(length=255), nullable=True),
    sa.Column('domain', sa.String(length=255), nullable=True),
    sa.Column('use_cases', sa.JSON(), nullable=True),
    sa.Column('steps', sa.JSON(), nullable=True),
    sa.Column('studio', sa.String(length=255), nullable=True),
    sa.Column('position', sa.String(length=255), nullable=True),
    sa.Column('industry', sa.String(length=255), nullable=True),
    *_timestamps(),
    sa.PrimaryKeyConstraint('id', name='pk_knowledge_entries')
    )
    op.create_index('ix_knowledge_entries_title', 'knowledge_entries', ['title'])
    op.create_index('ix_knowledge_entries_category', 'knowledge_entries', ['category'])
    op.create_index('ix_knowledge_entries_offer_status', 'knowledge_entries', ['offer_status'])

    for table, left, right in LINK_TABLES:
        op.create_table(table,
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column(left, sa.String(length=36), nullable=False),
        sa.Column(right, sa.String(length=36), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint([left], ['knowledge_entries.id'], name=f'fk_{table}_{left}_knowledge_entries', ondelete='CASCADE'),
        sa.ForeignKeyConstraint([right], ['knowledge_entries.id'], name=f'fk_{table}_{right}_knowledge_entries', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=f'pk_{table}'),
        sa.UniqueConstraint(left, right, name=f'uq_{table}_{left}_{right}')
        )
        op.create_index(f'ix_{table}_{left}', table, [left])
        op.create_index(f'ix_{table}_{right}', table, [right])

    op.create_table('offer_templates',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('file_name', sa.String(length=255), nullable=False),
    sa.Column('file_url', sa.String(length=1024), nullable=False),
    sa.Column('placeholders', sa.JSON(), nullable=True),
    sa.Column('extracted_structure', sa.JSON(), nullable=True),
    *_timestamps(),
    sa.PrimaryKeyConstraint('id', name='pk_offer_templates')
    )

    op.create_table('style_guides',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('tone_of_voice', sa.Text(), nullable=True),
    sa.Column('writing_guidelines', sa.Text(), nullable=True),
    sa.Column('brand_colors', sa.JSON(), nullable=True),
    sa.Column('typography_rules', sa.JSON(), nullable=True),
    sa.Column('file_name', sa.String(length=255), nullable=True),
    sa.Column('file_url', sa.String(length=1024), nullable=True),
    *_timestamps(),
    sa.PrimaryKeyConstraint('id', name='pk_style_guides')
    )

    op.create_table('content_drafts',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('title', sa.String(length=255), nullable=False),
    sa.Column('status', sa.String(length=20), nullable=False),
    sa.Column('tender_summary', sa.Text(), nullable=True),
    sa.Column('challenges', sa.JSON(), nullable=True),
    sa.Column('deliverables', sa.JSON(), nullable=True),
    sa.Column('requirements', sa.JSON(), nullable=True),
    sa.Column('winning_strategy', sa.Text(), nullable=True),
    sa.Column('referenced_offers', sa.JSON(), nullable=True),
    sa.Column('referenced_methods', sa.JSON(), nullable=True),
    sa.Column('draft_content', sa.Text(), nullable=True),
    sa.Column('selected_template_id', sa.String(length=36), nullable=True),
    sa.Column('selected_style_guide_id', sa.String(length=36), nullable=True),
    sa.Column('created_by', sa.String(length=64), nullable=True),
    sa.Column('currently_editing_by', sa.String(length=64), nullable=True),
    sa.Column('currently_editing_since', sa.DateTime(timezone=True), nullable=True),
    sa.Column('published_offer_id', sa.String(length=36), nullable=True),
    *_timestamps(),
    sa.ForeignKeyConstraint(['selected_template_id'], ['offer_templates.id'], name='fk_content_drafts_selected_template_id_offer_templates', ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['selected_style_guide_id'], ['style_guides.id'], name='fk_content_drafts_selected_style_guide_id_style_guides', ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['published_offer_id'], ['knowledge_entries.id'], name='fk_content_drafts_published_offer_id_knowledge_entries', ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id', name='pk_content_drafts')
    )

    op.create_table('content_draft_versions',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('draft_id', sa.String(length=36), nullable=False),
    sa.Column('version_number', sa.Integer(), nullable=False),
    sa.Column('content', sa.Text(), nullable=False),
    sa.Column('change_summary', sa.Text(), nullable=True),
    sa.Column('changed_by', sa.String(length=64), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    sa.ForeignKeyConstraint(['draft_id'], ['content_drafts.id'], name='fk_content_draft_versions_draft_id_content_drafts', ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id', name='pk_content_draft_versions'),
    sa.UniqueConstraint('draft_id', 'version_number', name='uq_content_draft_versions_draft_id_version_number')
    )
    op.create_index('ix_content_draft_versions_draft_id', 'content_draft_versions', ['draft_id'])

    op.create_table('document_parsing_jobs',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('file_name', sa.String(length=255), nullable=False),
    sa.Column('mime_type', sa.String(length=255), nullable=True),
    sa.Column('file_path', sa.String(length=1024), nullable=True),
    sa.Column('status', sa.Enum('pending', 'processing', 'completed', 'failed', name='parsing_job_status'), nullable=False),
    sa.Column('content', sa.Text(), nullable=True),
    sa.Column('error', sa.Text(), nullable=True),
    sa.Column('metadata', sa.JSON(), nullable=True),
    *_timestamps(),
    sa.PrimaryKeyConstraint('id', name='pk_document_parsing_jobs')
    )
    op.create_index('ix_document_parsing_jobs_status', 'document_parsing_jobs', ['status'])


def downgrade() -> None:
    op.drop_table('document_parsing_jobs')
    op.drop_table('content_draft_versions')
    op.drop_table('content_drafts')
    op.drop_table('style_guides')
    op.drop_table('offer_templates')
    for table, _, _ in reversed(LINK_TABLES):
        op.drop_table(table)
    op.drop_table('knowledge_entries')
    op.drop_table('users')
