import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tailorfit.core.errors import InsufficientInputError  # noqa: E402
from tailorfit.core.scoring import load_scoring_config  # noqa: E402
from tailorfit.features.match_scorer import (  # noqa: E402
    FLAG_MISSING_REQUIRED,
    FLAG_STUFFING,
    MUST_HAVE_CAP_REASON,
    match_strength,
    placement_score,
    score_match,
)
from tailorfit.features.segmenter import segment_document  # noqa: E402
from tailorfit.schemas.match import Keyword, SectionCounts  # noqa: E402
from tailorfit.taxonomy import get_default_taxonomy_provider  # noqa: E402

FRONTEND_KEYWORDS = [Keyword(term="react", weight=3), Keyword(term="typescript", weight=3), Keyword(term="graphql", weight=1)]

BASE_RESUME = "Summary: Frontend engineer.\nExperience\nBuilt dashboards for 20k users.\nSkills: CSS, HTML"

BACKEND_TERMS = [
    "python", "django", "flask", "postgresql", "redis", "docker", "kubernetes", "terraform", "kafka", "celery",
    "graphql", "pandas", "numpy", "airflow", "spark", "grafana", "nginx", "jenkins", "ansible", "linux",
]

STRONG_RESUME = (
    "Summary: Backend engineer working with python, django, flask and postgresql.\n"
    "Experience\n"
    "Built python services with django serving 2M users.\n"
    "Led flask migration cutting latency by 40%.\n"
    "Optimized postgresql queries saving $12,000 per year.\n"
    "Designed redis caching for 500 requests per second.\n"
    "Shipped docker images to kubernetes clusters for 12 teams.\n"
    "Implemented terraform modules reducing deploy time by 30%.\n"
    "Drove kafka and celery pipelines improving throughput by 25%.\n"
    "Launched graphql and pandas reporting for 40 clients.\n"
    "Scaled numpy and airflow jobs to 200 sessions.\n"
    "Skills: spark, grafana, nginx, jenkins, ansible, linux, python, django, flask, redis"
)


def _score(document, keywords):
    return score_match(document, keywords, segment_document(document))


class MatchStrengthTests(unittest.TestCase):
    def setUp(self):
        self.taxonomy = get_default_taxonomy_provider()
        self.config = load_scoring_config()

    def _strength(self, document, term):
        return match_strength(document.lower(), term, self.taxonomy, self.config)

    def test_exact_word_boundary_phrase(self):
        self.assertEqual(self._strength("Built React apps", "react"), 1.0)
        self.assertEqual(self._strength("Wrote C++ services", "c++"), 1.0)
        self.assertEqual(self._strength("Ran Node.js workers", "node.js"), 1.0)

    def test_synonym_hit_is_lower_confidence(self):
        self.assertEqual(self._strength("Built ReactJS apps", "react"), 0.85)

    def test_stemmed_head_word_hit(self):
        self.assertEqual(self._strength("Designed onboarding flows", "design system"), 0.6)

    def test_unrecognized_term_scores_zero(self):
        self.assertEqual(self._strength("Built React apps", "haskell"), 0.0)


class PlacementScoreTests(unittest.TestCase):
    def test_full_distribution_reaches_budget(self):
        config = load_scoring_config()
        self.assertAlmostEqual(placement_score(SectionCounts(summary=3, experience=10, skills=10), config), 15.0)

    def test_skills_heavy_distribution_is_capped(self):
        config = load_scoring_config()
        counts = SectionCounts(summary=3, experience=0, skills=10)
        self.assertAlmostEqual(placement_score(counts, config), config.stuffing_ceiling)

    def test_empty_counts_score_zero(self):
        self.assertEqual(placement_score(SectionCounts(), load_scoring_config()), 0.0)


class MatchScorerTests(unittest.TestCase):
    def test_missing_must_haves_cap_total(self):
        score = _score(BASE_RESUME, FRONTEND_KEYWORDS)
        self.assertLessEqual(score.total, 85)
        self.assertTrue(score.capped)
        self.assertEqual(score.cap_reason, MUST_HAVE_CAP_REASON)
        self.assertIn(FLAG_MISSING_REQUIRED, score.flags)
        self.assertEqual([item.term for item in score.missing], ["react", "typescript", "graphql"])
        self.assertEqual(score.breakdown.coverage, 0.0)

    def test_inserting_must_have_into_experience_raises_coverage(self):
        before = _score(BASE_RESUME, FRONTEND_KEYWORDS)
        after = _score(BASE_RESUME.replace("Built dashboards", "Built React dashboards"), FRONTEND_KEYWORDS)

        self.assertNotIn("react", [item.term for item in after.missing])
        self.assertAlmostEqual(after.breakdown.coverage - before.breakdown.coverage, 70 * 3 / 7, places=1)
        self.assertGreaterEqual(after.total, before.total)
        self.assertEqual(after.section_counts.experience, 1)
        self.assertEqual(after.context_points, 2)
        self.assertAlmostEqual(after.total, 32.7, places=1)

    def test_cap_law_holds_even_with_maximal_sub_scores(self):
        keywords = [Keyword(term=term, weight=1) for term in BACKEND_TERMS] + [Keyword(term="haskell", weight=3)]
        score = _score(STRONG_RESUME, keywords)

        self.assertEqual(score.breakdown.placement, 15.0)
        self.assertEqual(score.breakdown.context, 15.0)
        self.assertEqual(score.breakdown.penalty, 0.0)
        self.assertGreater(score.breakdown.coverage + 30, 85)
        self.assertEqual(score.total, 85.0)
        self.assertTrue(score.capped)

    def test_complete_match_reaches_full_score(self):
        keywords = [Keyword(term=term, weight=1) for term in BACKEND_TERMS] + [Keyword(term="haskell", weight=3)]
        score = _score(STRONG_RESUME + ", haskell", keywords)
        self.assertFalse(score.capped)
        self.assertEqual(score.missing, [])
        self.assertEqual(score.total, 100.0)

    def test_keyword_dumping_in_skills_scores_no_higher_than_spread_usage(self):
        keywords = [Keyword(term="terraform", weight=3), Keyword(term="python", weight=2)]
        stuffed = (
            "Summary: Platform engineer.\nExperience\nManaged cloud infrastructure for 30 teams.\n"
            "Skills: " + " ".join(["terraform"] * 10)
        )
        spread = (
            "Summary: Platform engineer.\nExperience\nManaged terraform infrastructure for 30 teams.\n"
            "Skills: terraform"
        )
        stuffed_score = _score(stuffed, keywords)
        spread_score = _score(spread, keywords)

        self.assertLessEqual(stuffed_score.total, spread_score.total)
        self.assertGreater(stuffed_score.breakdown.penalty, 0)
        self.assertEqual(spread_score.breakdown.penalty, 0)

    def test_penalty_is_capped_and_flagged(self):
        terms = ["ansible", "bash", "cobol", "dart", "elixir", "fortran", "groovy", "haskell", "julia", "kotlin", "lua", "perl"]
        keywords = [Keyword(term=term, weight=1) for term in terms]
        document = "Skills: " + " ".join(term for term in terms for _ in range(4))
        score = _score(document, keywords)

        self.assertEqual(score.breakdown.penalty, 10.0)
        self.assertIn(FLAG_STUFFING, score.flags)
        self.assertGreaterEqual(score.total, 0.0)
        self.assertLessEqual(score.total, 100.0)

    def test_verbose_documents_lose_coverage(self):
        keywords = [Keyword(term="python", weight=1)]
        slightly_long = _score("Experience\nBuilt python tools.\n" + "filler " * 1296, keywords)
        very_long = _score("Experience\nBuilt python tools.\n" + "filler " * 2300, keywords)

        self.assertLess(slightly_long.breakdown.coverage, 70.0)
        self.assertGreater(slightly_long.breakdown.coverage, very_long.breakdown.coverage)
        self.assertAlmostEqual(very_long.breakdown.coverage, 68.0)

    def test_insertion_crossing_word_limit_still_raises_coverage(self):
        keywords = [Keyword(term="react", weight=3)] + [Keyword(term=f"skill{i}", weight=3) for i in range(39)]
        filler = " ".join(["filler"] * 1196)
        before_doc = "Experience\nBuilt ReactJS apps.\n" + filler
        after_doc = "Experience\nBuilt React ReactJS apps.\n" + filler
        self.assertEqual(len(before_doc.split()), 1200)
        self.assertEqual(len(after_doc.split()), 1201)

        before = _score(before_doc, keywords)
        after = _score(after_doc, keywords)

        self.assertGreater(after.breakdown.coverage, before.breakdown.coverage)
        self.assertGreaterEqual(after.total, before.total)

    def test_missing_sorted_by_weight_then_strength(self):
        keywords = [Keyword(term="haskell", weight=1), Keyword(term="react", weight=3), Keyword(term="rust", weight=3)]
        score = _score("Experience\nBuilt ReactJS apps.", keywords)
        self.assertEqual([item.term for item in score.missing], ["rust", "react", "haskell"])
        self.assertEqual(score.missing[1].match_strength, 0.85)

    def test_placeholder_marker_counts_as_metric(self):
        keywords = [Keyword(term="kafka", weight=2)]
        score = _score("Experience\nBuilt kafka consumers cutting lag by [verify].", keywords)
        self.assertEqual(score.context_points, 2)

    def test_scoring_is_pure(self):
        first = _score(STRONG_RESUME, FRONTEND_KEYWORDS)
        second = _score(STRONG_RESUME, FRONTEND_KEYWORDS)
        self.assertEqual(first.model_dump(), second.model_dump())

    def test_empty_document_is_insufficient_input(self):
        with self.assertRaises(InsufficientInputError):
            score_match("", FRONTEND_KEYWORDS, segment_document(""))


if __name__ == "__main__":
    unittest.main()
