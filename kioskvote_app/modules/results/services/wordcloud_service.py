# File: kioskvote_app/modules/results/services/wordcloud_service.py
# Generates the per-language word-cloud images shown after a vote.
#
# Layout under RESULTS_FOLDER:
#   staging/<submission_id>/<lang>.png   precomputed while the launch animation plays
#   current/<lang>.png                   last committed result

import logging
import os
import shutil
from typing import Dict, Mapping, Optional, Sequence

from bidi.algorithm import get_display
from flask import current_app, url_for
from wordcloud import WordCloud

from kioskvote_app.core.error_handlers import NotFoundError, ResultGenerationError
from kioskvote_app.modules.i18n.services.translation_service import TranslationService
from kioskvote_app.modules.voting.services.vote_service import VoteService

logger = logging.getLogger(__name__)

STAGING_DIRNAME = 'staging'
CURRENT_DIRNAME = 'current'


class WordCloudService:

    @staticmethod
    def _results_folder() -> str:
        return current_app.config['RESULTS_FOLDER']

    @classmethod
    def staging_dir(cls, submission_id: str) -> str:
        return os.path.join(cls._results_folder(), STAGING_DIRNAME, submission_id)

    @classmethod
    def current_dir(cls) -> str:
        return os.path.join(cls._results_folder(), CURRENT_DIRNAME)

    @staticmethod
    def build_frequencies(language: str, tally: Mapping[str, int],
                          extra_keys: Sequence[str] = ()) -> Dict[str, int]:
        """
        Map translated labels to vote counts, counting ``extra_keys`` once more.
        Items nobody chose are left out.
        """
        rtl = TranslationService.is_rtl(language)
        frequencies: Dict[str, int] = {}
        for key, count in tally.items():
            total = count + (1 if key in extra_keys else 0)
            if total <= 0:
                continue
            label = TranslationService.label_for(language, key)
            if rtl:
                # WordCloud draws glyphs left to right
                label = get_display(label)
            frequencies[label] = frequencies.get(label, 0) + total
        return frequencies

    @staticmethod
    def render(frequencies: Mapping[str, int], path: str) -> str:
        """Render ``frequencies`` to a PNG at ``path`` (written atomically)."""
        if not frequencies:
            raise ResultGenerationError('No votes to draw')

        config = current_app.config
        cloud = WordCloud(
            width=config['WORDCLOUD_WIDTH'],
            height=config['WORDCLOUD_HEIGHT'],
            background_color=config['WORDCLOUD_BACKGROUND'],
            colormap=config['WORDCLOUD_COLORMAP'],
            max_words=config['WORDCLOUD_MAX_WORDS'],
            font_path=config.get('WORDCLOUD_FONT_PATH'),
            prefer_horizontal=0.9,
        )
        cloud.generate_from_frequencies(dict(frequencies))

        tmp_path = f'{path}.tmp.png'
        cloud.to_file(tmp_path)
        os.replace(tmp_path, path)
        return path

    @classmethod
    def precompute(cls, keys: Sequence[str], language: str, submission_id: str) -> Dict[str, str]:
        """
        Render the cloud for every configured language, counting the ballot
        ``keys`` exactly once whether or not it has been stored yet.
        Returns ``{language: asset url}``.
        """
        config = current_app.config
        languages = list(config['LANGUAGES'])
        # The requesting kiosk's language first so its failure surfaces early
        languages.sort(key=lambda lang: lang != language)

        tally = VoteService.get_tally(config['VOTE_ITEMS'], exclude_submission_id=submission_id)
        target_dir = cls.staging_dir(submission_id)
        os.makedirs(target_dir, exist_ok=True)

        assets = {}
        for lang in languages:
            path = os.path.join(target_dir, f'{lang}.png')
            try:
                cls.render(cls.build_frequencies(lang, tally, keys), path)
            except (OSError, ValueError) as exc:
                logger.error("Word cloud for %s (%s) failed: %s", submission_id, lang, exc, exc_info=True)
                raise ResultGenerationError(f'Could not render word cloud: {exc}', language=lang) from exc
            assets[lang] = url_for('results.staged_asset', submission_id=submission_id, language=lang)

        logger.info("Precomputed word clouds for %s in %s", submission_id, ", ".join(languages))
        cls.prune_staging(keep=config['RESULTS_STAGING_KEEP'], protect=submission_id)
        return assets

    @classmethod
    def commit(cls, submission_id: str) -> Dict[str, str]:
        """Promote the staged images of ``submission_id`` to the current result."""
        source_dir = cls.staging_dir(submission_id)
        languages = current_app.config['LANGUAGES']
        missing = [lang for lang in languages
                   if not os.path.isfile(os.path.join(source_dir, f'{lang}.png'))]
        if missing:
            raise NotFoundError(f"No precomputed result for '{submission_id}'", resource=submission_id)

        target_dir = cls.current_dir()
        os.makedirs(target_dir, exist_ok=True)
        assets = {}
        for lang in languages:
            target = os.path.join(target_dir, f'{lang}.png')
            tmp_target = f'{target}.tmp'
            shutil.copyfile(os.path.join(source_dir, f'{lang}.png'), tmp_target)
            os.replace(tmp_target, target)
            assets[lang] = url_for('results.current_asset', language=lang, v=submission_id)

        logger.info("Committed word clouds of %s", submission_id)
        return assets

    @classmethod
    def prune_staging(cls, keep: int, protect: Optional[str] = None) -> int:
        """Delete all but the ``keep`` most recent staging directories."""
        staging_root = os.path.join(cls._results_folder(), STAGING_DIRNAME)
        if not os.path.isdir(staging_root):
            return 0

        entries = [entry for entry in os.scandir(staging_root)
                   if entry.is_dir() and entry.name != protect]
        entries.sort(key=lambda entry: entry.stat().st_mtime, reverse=True)
        # The protected directory counts towards ``keep``
        stale = entries[max(keep - (1 if protect else 0), 0):]
        for entry in stale:
            shutil.rmtree(entry.path, ignore_errors=True)
        if stale:
            logger.debug("Pruned %d staged results", len(stale))
        return len(stale)
