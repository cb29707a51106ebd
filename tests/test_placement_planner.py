import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tailorfit.features.match_scorer import score_match  # noqa: E402
from tailorfit.features.placement_planner import plan_placements  # noqa: E402
from tailorfit.features.segmenter import segment_document  # noqa: E402
from tailorfit.schemas.match import Keyword  # noqa: E402

KEYWORDS = [Keyword(term="react", weight=3), Keyword(term="typescript", weight=3), Keyword(term="graphql", weight=1)]

RESUME = "Summary: Frontend engineer.\nExperience\nBuilt dashboards for 20k users.\nSkills: CSS, HTML"

BACKEND_TERMS = [
    "python", "django", "flask", "postgresql", "redis", "docker", "kubernetes", "terraform", "kafka", "celery",
    "graphql", "pandas", "numpy", "airflow", "spark", "grafana", "nginx", "jenkins", "ansible", "linux",
]

BACKEND_RESUME = (
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


class PlacementPlannerTests(unittest.TestCase):
    def test_greedy_plan_prefers_experience_and_projects_upward(self):
        score = _score(RESUME, KEYWORDS)
        plan = plan_placements(KEYWORDS, score, target=95)

        self.assertEqual([item.term for item in plan.items], ["react", "typescript", "graphql"])
        self.assertTrue(all(item.target_section == "experience" for item in plan.items))
        first = plan.items[0]
        self.assertAlmostEqual(first.estimated_coverage_delta, 30.0)
        self.assertAlmostEqual(first.estimated_placement_delta, 0.7)
        self.assertAlmostEqual(first.estimated_context_delta, 2.0)
        self.assertEqual(plan.current_total, score.total)
        self.assertAlmostEqual(plan.projected_total, 78.1, places=1)
        self.assertEqual(plan.target, 95)

    def test_stops_once_target_is_projected(self):
        plan = plan_placements(KEYWORDS, _score(RESUME, KEYWORDS), target=40)
        self.assertEqual([item.term for item in plan.items], ["react", "typescript"])
        self.assertGreaterEqual(plan.projected_total, 40)

    def test_respects_insertion_limit(self):
        plan = plan_placements(KEYWORDS, _score(RESUME, KEYWORDS), max_insertions=1)
        self.assertEqual(len(plan.items), 1)
        self.assertAlmostEqual(plan.projected_total, 32.7, places=1)

    def test_empty_plan_when_target_already_met(self):
        score = _score(RESUME, KEYWORDS)
        plan = plan_placements(KEYWORDS, score, target=0)
        self.assertEqual(plan.items, [])
        self.assertEqual(plan.projected_total, score.total)

    def test_empty_plan_when_no_insertions_allowed(self):
        plan = plan_placements(KEYWORDS, _score(RESUME, KEYWORDS), max_insertions=0)
        self.assertEqual(plan.items, [])

    def test_projection_stays_capped_while_a_must_have_is_unplanned(self):
        keywords = [Keyword(term=term, weight=2) for term in BACKEND_TERMS] + [
            Keyword(term="haskell", weight=3),
            Keyword(term="rust", weight=3),
        ]
        score = _score(BACKEND_RESUME, keywords)
        breakdown = score.breakdown
        self.assertGreater(breakdown.coverage + breakdown.placement + breakdown.context - breakdown.penalty, 85)
        self.assertTrue(score.capped)
        self.assertEqual(score.total, 85.0)

        single = plan_placements(keywords, score, target=95, max_insertions=1)
        self.assertEqual([item.term for item in single.items], ["haskell"])
        self.assertEqual(single.projected_total, 85.0)

        full = plan_placements(keywords, score, target=95)
        self.assertEqual([item.term for item in full.items], ["haskell", "rust"])
        self.assertEqual(full.projected_total, 100.0)

    def test_default_target_comes_from_scoring_config(self):
        plan = plan_placements(KEYWORDS, _score(RESUME, KEYWORDS))
        self.assertEqual(plan.target, 95)

    def test_partial_matches_contribute_remaining_strength_only(self):
        keywords = [Keyword(term="react", weight=3), Keyword(term="rust", weight=1)]
        score = _score("Experience\nBuilt ReactJS apps.", keywords)
        plan = plan_placements(keywords, score, target=100)

        react = next(item for item in plan.items if item.term == "react")
        self.assertAlmostEqual(react.estimated_coverage_delta, 7.875, places=1)


if __name__ == "__main__":
    unittest.main()
