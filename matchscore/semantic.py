"""
Semantic similarity between a résumé and a job description.

Both texts are condensed by a summarization capability, then compared by a
sentence-similarity capability. The two summaries do not depend on each
other and are requested concurrently; similarity waits for both.

No retry happens here. Provider failures surface as ProviderError to the
caller; retry and circuit breaking belong to the provider client.
"""

from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Protocol, Tuple

from .errors import ProviderError
from .logger import get_logger

logger = get_logger()


class Summarizer(Protocol):
    def summarize(self, text: str) -> str:
        ...


class SimilarityScorer(Protocol):
    def similarity(self, source: str, target: str) -> float:
        ...


@dataclass(frozen=True)
class SemanticResult:
    """Provider similarity in [0, 1] plus the condensed texts it was computed on."""

    score: float
    resume_summary: str
    job_summary: str


def _call(capability: str, func, *args):
    try:
        return func(*args)
    except ProviderError:
        raise
    except Exception as e:
        # Third-party capabilities may raise anything; callers only see ProviderError.
        raise ProviderError(f"{capability} failed: {e}", capability=capability) from e


def condense_pair(resume_text: str, job_text: str, summarizer: Summarizer) -> Tuple[str, str]:
    """
    Summarize résumé and job text concurrently. Returns (resume_summary, job_summary).

    The first failure is raised as soon as it happens; the other call is
    abandoned rather than awaited.
    """
    pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="summarize")
    try:
        resume_future = pool.submit(_call, "summarize", summarizer.summarize, resume_text)
        job_future = pool.submit(_call, "summarize", summarizer.summarize, job_text)
        done, _ = wait((resume_future, job_future), return_when=FIRST_EXCEPTION)
        for future in (resume_future, job_future):
            if future in done and future.exception() is not None:
                raise future.exception()
        return resume_future.result(), job_future.result()
    finally:
        pool.shutdown(wait=False, cancel_futures=True)


def semantic_match(
    resume_text: str, job_text: str, summarizer: Summarizer, scorer: SimilarityScorer
) -> SemanticResult:
    """Condense both texts and score their closeness."""
    resume_summary, job_summary = condense_pair(resume_text, job_text, summarizer)
    logger.debug(
        "Condensed texts for similarity",
        resume_summary_chars=len(resume_summary),
        job_summary_chars=len(job_summary),
    )
    score = _call("similarity", scorer.similarity, resume_summary, job_summary)
    return SemanticResult(score=score, resume_summary=resume_summary, job_summary=job_summary)


def semantic_similarity(
    resume_text: str, job_text: str, summarizer: Summarizer, scorer: SimilarityScorer
) -> float:
    """Return the provider's [0, 1] similarity between condensed résumé and job text."""
    return semantic_match(resume_text, job_text, summarizer, scorer).score
