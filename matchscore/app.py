import argparse
import json
import random
from pathlib import Path

from . import __version__
from .config import Settings
from .engine import MatchEngine
from .env import load_env
from .errors import InputError, InvariantError, ProviderError
from .extraction import extract_requirements
from .logger import get_logger
from .records import build_record
from .storage import MatchStore
from .taxonomy import default_taxonomy, load_taxonomy

EXIT_INVALID_INPUT = 2
EXIT_PROVIDER_UNAVAILABLE = 3
EXIT_INTERNAL_ERROR = 4


def _read_text(path_str: str) -> str:
    path = Path(path_str)
    if not path.exists():
        raise SystemExit(f"Input file not found: {path}")
    return path.read_text(encoding="utf-8")


def _taxonomy(settings: Settings):
    return load_taxonomy(settings.taxonomy_path) if settings.taxonomy_path else default_taxonomy()


def cmd_score(args: argparse.Namespace, settings: Settings) -> None:
    resume_text = _read_text(args.resume)
    job_text = _read_text(args.job)
    rng = random.Random(args.seed) if args.seed is not None else None
    engine = MatchEngine.from_settings(settings, rng=rng)

    try:
        result = engine.compute_match(resume_text, job_text)
    except InputError as e:
        print("Could not score: invalid input.")
        for err in e.errors:
            print(f" - {err}")
        raise SystemExit(EXIT_INVALID_INPUT)
    except ProviderError as e:
        print(f"Could not score: provider unavailable ({e}). Try again later.")
        raise SystemExit(EXIT_PROVIDER_UNAVAILABLE)
    except InvariantError as e:
        print(f"Could not score: internal error ({e}).")
        raise SystemExit(EXIT_INTERNAL_ERROR)

    resume_ref = args.resume_ref or Path(args.resume).stem
    job_ref = args.job_ref or Path(args.job).stem
    record = build_record(resume_ref, job_ref, result.final_score, result.recommendation_text)
    if not args.no_save:
        MatchStore(Path(args.db) if args.db else settings.db_path).save(record)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return
    print(f"Match score: {result.final_score}")
    print(f"  Semantic: {result.components.semantic_score:.1f}")
    print(f"  Skills:   {result.components.rule_score:.1f}")
    print()
    print(result.recommendation_text)


def cmd_skills(args: argparse.Namespace, settings: Settings) -> None:
    taxonomy = _taxonomy(settings)
    skills = taxonomy.ordered(taxonomy.detect(_read_text(args.input)))
    if not skills:
        print("No known skills found.")
        return
    print(f"Found {len(skills)} skills:")
    for skill in skills:
        print(f" - {skill} ({taxonomy.category_of(skill)})")


def cmd_requirements(args: argparse.Namespace, settings: Settings) -> None:
    bundle = extract_requirements(_read_text(args.input))
    for label, phrases in (
        ("Experience", bundle.experience),
        ("Education", bundle.education),
        ("Expertise", bundle.expertise),
    ):
        print(f"{label}: {', '.join(phrases) if phrases else '(none)'}")


def cmd_history(args: argparse.Namespace, settings: Settings) -> None:
    db_path = Path(args.db) if args.db else settings.db_path
    if not db_path.exists():
        print(f"Database not found: {db_path}")
        return
    records = MatchStore(db_path).history(resume_ref=args.resume_ref, job_ref=args.job_ref)
    if not records:
        print("No match records.")
        return
    print(f"Found {len(records)} match records in {db_path}:\n")
    for record in records:
        print(f"Resume: {record.resume_ref}  Job: {record.job_ref}  Score: {record.match_score}")


def cmd_taxonomy(args: argparse.Namespace, settings: Settings) -> None:
    taxonomy = _taxonomy(settings)
    print(f"Skill taxonomy version {taxonomy.version} ({len(taxonomy)} skills)")
    for category, skills in taxonomy.categories.items():
        print(f"  {category}: {', '.join(skills)}")


def main(argv=None):
    # Load .env if present (HF_API_KEY, MATCHSCORE_* overrides)
    load_env()
    parser = argparse.ArgumentParser(prog="matchscore", description="Score a resume against a job description")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    scr = subparsers.add_parser("score", help="Score a resume against a job description and save the result")
    scr.add_argument("--resume", required=True, help="Path to resume plain text")
    scr.add_argument("--job", required=True, help="Path to job description plain text")
    scr.add_argument("--resume-ref", help="Resume identifier to store (default: file name)")
    scr.add_argument("--job-ref", help="Job identifier to store (default: file name)")
    scr.add_argument("--db", help="SQLite database path (default: MATCHSCORE_DB_PATH or data/matches.db)")
    scr.add_argument("--no-save", action="store_true", help="Do not persist the match record")
    scr.add_argument("--seed", type=int, help="Seed for recommendation phrasing")
    scr.add_argument("--json", action="store_true", help="Print the result as JSON")
    scr.set_defaults(func=cmd_score)

    skl = subparsers.add_parser("skills", help="List known skills mentioned in a text file")
    skl.add_argument("--input", required=True, help="Path to plain text")
    skl.set_defaults(func=cmd_skills)

    req = subparsers.add_parser("requirements", help="Extract experience/education/expertise requirements from a job text")
    req.add_argument("--input", required=True, help="Path to job description plain text")
    req.set_defaults(func=cmd_requirements)

    hst = subparsers.add_parser("history", help="List stored match records")
    hst.add_argument("--db", help="SQLite database path")
    hst.add_argument("--resume-ref", help="Only records for this resume")
    hst.add_argument("--job-ref", help="Only records for this job")
    hst.set_defaults(func=cmd_history)

    tax = subparsers.add_parser("taxonomy", help="Show the skill vocabulary")
    tax.set_defaults(func=cmd_taxonomy)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        try:
            settings = Settings.from_env()
        except ValueError as e:
            raise SystemExit(f"Invalid configuration: {e}")
        get_logger().set_level(settings.log_level)
        args.func(args, settings)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
