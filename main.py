import sys
import json
import logging
import argparse
from datetime import datetime
from typing import Any, Dict, List, Optional

import yaml
from dateutil import parser as date_parser

from core.app_context import AppContext
from core.config_loader import load_config
from core.engine import MatchingEngine
from core.exceptions import MatchingError
from core.matcher.models import Candidate
from core.requirements import NormalizationResult, RequirementSetDraft
from core.scorer.models import MatchBatch

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def load_fixture(path: str) -> Dict[str, Any]:
    """Read a YAML or JSON file holding requirements and a candidate pool.

    Expected shape:
        requirement_set: {id, version, skills, experience_years, ...}
        query: "free text"          # alternative to requirement_set
        candidates: [{id, skills, experience_records, ...}]
        as_of: 2026-01-01           # optional, defaults to now
    """
    with open(path, "r", encoding="utf-8") as f:
        if path.endswith(".json"):
            return json.load(f)
        return yaml.safe_load(f) or {}


def normalize_fixture(engine: MatchingEngine, data: Dict[str, Any]) -> NormalizationResult:
    if data.get('requirement_set'):
        return engine.normalize(RequirementSetDraft(**data['requirement_set']))
    if data.get('query'):
        return engine.from_text(data.get('id', 'query'), int(data.get('version', 0)), data['query'])
    raise MatchingError("Fixture needs either 'requirement_set' or 'query'")


def print_batch(batch: MatchBatch, explain: bool = False, top: Optional[int] = None):
    matches = batch.matches[:top] if top else batch.matches
    print(f"\n{batch.requirement_set_id} v{batch.version}: {len(batch.matches)} ranked candidates")
    print("-" * 72)
    for rank, match in enumerate(matches, 1):
        subs = match.sub_scores
        print(
            f"{rank:>3}. {match.candidate_id:<20} {match.overall_score:>3}  {match.readiness_level.value:<10} "
            f"skills={subs.skills:.0f} exp={subs.experience:.0f} ready={subs.readiness:.0f} "
            f"culture={subs.cultural:.0f} growth={subs.growth:.0f}"
        )
        if explain:
            explanation = match.explanation
            for label, items in (
                ("strengths", explanation.strengths),
                ("gaps", explanation.gaps),
                ("development", explanation.development_path),
                ("risks", explanation.risk_factors),
                ("recommendations", explanation.recommendations),
            ):
                for item in items:
                    print(f"       {label:<15} {item}")
            print(f"       {'time to ready':<15} {explanation.time_to_ready} (confidence {explanation.confidence}%)")
    for failure in batch.failures:
        print(f"  !  {failure.candidate_id}: {failure.error_type}: {failure.reason}")


def batch_to_dict(batch: MatchBatch) -> Dict[str, Any]:
    return {
        'requirement_set_id': batch.requirement_set_id,
        'version': batch.version,
        'computed_at': batch.computed_at.isoformat(),
        'matches': [
            {
                'candidate_id': m.candidate_id,
                'overall_score': m.overall_score,
                'readiness_level': m.readiness_level.value,
                'sub_scores': m.sub_scores.as_dict(),
                'explanation': {
                    'strengths': m.explanation.strengths,
                    'gaps': m.explanation.gaps,
                    'development_path': m.explanation.development_path,
                    'risk_factors': m.explanation.risk_factors,
                    'recommendations': m.explanation.recommendations,
                    'estimated_readiness_months': m.explanation.estimated_readiness_months,
                    'confidence': m.explanation.confidence,
                },
            }
            for m in batch.matches
        ],
        'failures': [
            {'candidate_id': f.candidate_id, 'reason': f.reason, 'error_type': f.error_type}
            for f in batch.failures
        ],
    }


def run_score(args) -> int:
    config = load_config(args.config)
    if args.workers:
        config.matching.scorer.max_workers = args.workers

    data = load_fixture(args.fixture)
    as_of = date_parser.parse(str(data['as_of'])) if data.get('as_of') else datetime.now()

    engine = AppContext.build(config, clock=lambda: as_of).engine

    normalized = normalize_fixture(engine, data)
    for name in normalized.unresolved:
        logger.warning(f"Unresolved skill kept as keyword: {name}")

    candidates: List[Candidate] = [Candidate.from_dict(c) for c in data.get('candidates') or []]
    batch = engine.get_or_compute(normalized.requirement_set, candidates)

    if args.json:
        print(json.dumps(batch_to_dict(batch), indent=2, ensure_ascii=False))
    else:
        print_batch(batch, explain=args.explain, top=args.top)
        print()
        print(engine.search_summary(batch.requirement_set_id, data.get('query')))
    return 0


def run_serve(args) -> int:
    from web.backend.app import main as serve
    serve()
    return 0


def main():
    parser = argparse.ArgumentParser(description="Candidate matching engine")
    subparsers = parser.add_subparsers(dest='command', required=True)

    score = subparsers.add_parser('score', help='Rank the candidates in a fixture file')
    score.add_argument('fixture', help='YAML or JSON file with requirements and candidates')
    score.add_argument('--config', default='config.yaml', help='Path to config.yaml')
    score.add_argument('--top', type=int, default=None, help='Only print the first N candidates')
    score.add_argument('--explain', action='store_true', help='Print explanations')
    score.add_argument('--json', action='store_true', help='Print the result as JSON')
    score.add_argument('--workers', type=int, default=None, help='Score candidates in parallel')
    score.set_defaults(handler=run_score)

    serve = subparsers.add_parser('serve', help='Run the HTTP API')
    serve.set_defaults(handler=run_serve)

    args = parser.parse_args()
    try:
        sys.exit(args.handler(args))
    except MatchingError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        sys.exit(2)


if __name__ == "__main__":
    main()
