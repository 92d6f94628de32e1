from alembic import op

revision = '0002_survey_results_function'
down_revision = '0001_init_content'
branch_labels = None
depends_on = None


# One row per (question, option) with its vote count, plus the number of
# responses to the survey repeated on every row.
def upgrade():
    op.execute("""
    CREATE OR REPLACE FUNCTION get_survey_results(p_survey_id uuid)
    RETURNS TABLE (question text, option text, vote_count bigint, total_votes bigint)
    LANGUAGE sql
    STABLE
    AS $$
        WITH answered AS (
            SELECT btrim(a->>'question') AS question,
                   btrim(a->>'answer')   AS option
            FROM survey_responses sr
            CROSS JOIN LATERAL jsonb_array_elements(
                CASE WHEN jsonb_typeof(sr.answers) = 'array' THEN sr.answers ELSE '[]'::jsonb END
            ) AS a
            WHERE sr.survey_id = p_survey_id
        ),
        total AS (
            SELECT count(*)::bigint AS n
            FROM survey_responses
            WHERE survey_id = p_survey_id
        )
        SELECT an.question, an.option, count(*)::bigint, (SELECT n FROM total)
        FROM answered an
        WHERE coalesce(an.question, '') <> '' AND coalesce(an.option, '') <> ''
        GROUP BY an.question, an.option
        ORDER BY an.question, an.option
    $$;
    """)


def downgrade():
    op.execute("DROP FUNCTION IF EXISTS get_survey_results(uuid)")
