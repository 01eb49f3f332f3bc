"""Score lookups: file references on work pages and file metadata."""

from __future__ import annotations

import logging
import re
from typing import Final

from easy_imslp.api.errors import ErrorDetails, ImslpError, NotFoundError
from easy_imslp.api.mediawiki import NS_FILE, ImageInfo, MediaWikiApi
from easy_imslp.parsers.response import parse_score_wikitext
from easy_imslp.parsers.types import ParseResult, Score, ValidationResult
from easy_imslp.parsers.wikitext import extract_templates
from easy_imslp.services.composer import normalize_slug
from easy_imslp.services.validation import validate_score
from easy_imslp.urls import (
    build_direct_download_url,
    build_download_url,
    build_file_url,
    build_page_url,
)

logger = logging.getLogger(__name__)

FILE_TEMPLATE_MARKERS: Final[tuple[str, ...]] = ("file", "score", "#fte", "#sfe")
PMLP_FILE_PATTERN: re.Pattern[str] = re.compile(r"PMLP\d+[-_][^|\s}]+\.pdf", re.IGNORECASE)
CATEGORY_FILE_LIMIT = 100
FILENAME_HINT = "Check the filename. IMSLP filenames usually start with PMLP."


def score_from_image_info(filename: str, image_info: ImageInfo | None) -> Score:
    """Minimal Score from file metadata."""
    return Score(
        id=filename,
        filename=filename,
        url=build_file_url(filename),
        download_url=build_download_url(filename),
        file_size=image_info.size if image_info else None,
    )


class ScoreService:
    """Find the score files attached to works."""

    def __init__(self, mediawiki: MediaWikiApi) -> None:
        self.mediawiki = mediawiki

    def get_work_scores(self, work_slug: str) -> ParseResult[list[Score]]:
        """All scores referenced by a work page.

        Scores come from file templates and bare ``PMLP....pdf`` references;
        when the page has neither, the work's file category is listed.

        Raises:
            NotFoundError: The work page is empty or missing.
        """
        normalized = normalize_slug(work_slug)
        scores: list[Score] = []
        warnings: list[str] = []

        try:
            wikitext = self.mediawiki.get_page_wikitext(normalized)
        except NotFoundError:
            raise
        except ImslpError as e:
            logger.warning(f"Error fetching scores for {work_slug}: {e}")
            return ParseResult(data=[], warnings=[f"Error fetching scores for work: {work_slug}"])

        if not wikitext:
            raise NotFoundError(
                f"Work not found: {work_slug}",
                ErrorDetails(url=build_page_url(normalized), suggestion="Check the work slug format."),
            )

        seen: set[str] = set()
        for template in extract_templates(wikitext):
            lowered = template.name.lower()
            if not any(marker in lowered for marker in FILE_TEMPLATE_MARKERS):
                continue
            filename = template.params.get("filename") or template.params.get("name")
            if not filename or filename in seen:
                continue
            seen.add(filename)
            parsed = parse_score_wikitext(template.raw, filename)
            scores.append(parsed.data)
            warnings.extend(parsed.warnings)

        for match in PMLP_FILE_PATTERN.finditer(wikitext):
            filename = match.group(0)
            if filename in seen:
                continue
            seen.add(filename)
            parsed = parse_score_wikitext("", filename)
            scores.append(parsed.data)
            warnings.extend(parsed.warnings)

        if not scores:
            category_scores = self._scores_from_category(normalized)
            scores.extend(category_scores.data)
            warnings.extend(category_scores.warnings)

        return ParseResult(data=scores, warnings=warnings)

    def _scores_from_category(self, work_slug: str) -> ParseResult[list[Score]]:
        try:
            members, _ = self.mediawiki.get_category_members(
                work_slug, limit=CATEGORY_FILE_LIMIT, namespace=NS_FILE
            )
        except ImslpError as e:
            logger.warning(f"Could not list file category for {work_slug}: {e}")
            return ParseResult(data=[], warnings=["Could not fetch scores from category"])

        scores: list[Score] = []
        for member in members:
            filename = member.title.removeprefix("File:")
            if not filename.lower().endswith(".pdf"):
                continue
            try:
                image_info = self.mediawiki.get_image_info(filename)
            except ImslpError as e:
                logger.debug(f"No image info for {filename}: {e}")
                scores.append(parse_score_wikitext("", filename).data)
                continue
            scores.append(score_from_image_info(filename, image_info))

        return ParseResult(data=scores, warnings=[])

    def get_score(self, filename: str) -> ParseResult[Score]:
        """File metadata for one score.

        Raises:
            NotFoundError: The file does not exist or could not be fetched.
        """
        details = ErrorDetails(url=build_file_url(filename), suggestion=FILENAME_HINT)
        try:
            image_info = self.mediawiki.get_image_info(filename)
        except ImslpError as e:
            raise NotFoundError(f"Score not found: {filename}", details) from e

        if image_info is None:
            raise NotFoundError(f"Score not found: {filename}", details)

        return ParseResult(data=score_from_image_info(filename, image_info), warnings=[])

    def get_score_download_url(self, filename: str) -> str:
        return build_download_url(filename)

    def get_direct_download_url(self, filename: str) -> str:
        return build_direct_download_url(filename)

    def validate_score(self, score: Score) -> ValidationResult:
        return validate_score(score)
