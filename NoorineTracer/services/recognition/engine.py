"""Recognition engine: fuse text recognition and shape analysis into one score.

Each evaluation forks text recognition and shape analysis onto its own small
thread pool and joins both before fusion. Recognizer failures (timeout, backend
error, no text) degrade to ``recognized_text=None`` and push fusion into the
shape-dominant branch; shape analysis errors propagate to the caller.
"""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Callable, Optional

from NoorineTracer.core.config import AppConfig, FusionConfig
from NoorineTracer.core.models import RasterBitmap, RecognitionResult, ShapeAnalysis, clamp01
from NoorineTracer.services.similarity.letter_similarity import compare_letters
from NoorineTracer.services.similarity.shape_similarity import analyze_shape

logger = logging.getLogger(__name__)


def fuse_scores(text_score: float, analysis: ShapeAnalysis, cfg: FusionConfig | None = None) -> float:
    """Blend the text and shape signals.

    Priority order:
      1. strong text match: trust whichever signal is higher
      2. weak/wrong text match: heavily discount the shape score
      3. no usable text: shape score, slightly discounted
    then cap by coverage when the glyph was barely traced, and scale down
    when too much ink landed outside it.
    """
    cfg = cfg or FusionConfig()
    shape_score = analysis.combined_score

    if text_score >= cfg.high_text_score:
        final = max(text_score, shape_score)
    elif 0 < text_score < cfg.weak_text_score:
        final = shape_score * cfg.wrong_letter_factor
    else:
        final = shape_score * cfg.shape_only_factor

    if analysis.stroke_coverage < cfg.min_coverage:
        final = min(final, analysis.stroke_coverage)

    if analysis.overflow_penalty > cfg.max_overflow:
        final *= 1.0 - analysis.overflow_penalty * cfg.overflow_factor

    return clamp01(final)


class RecognitionEngine:
    """Evaluate a user's drawing against a reference glyph.

    Usage:
        with RecognitionEngine(create_recognizer(cfg), cfg) as engine:
            result = engine.evaluate(user_bitmap, reference_bitmap, 'ب')
    """

    def __init__(self, recognizer, config: AppConfig | None = None) -> None:
        self.recognizer = recognizer
        self.config = config or AppConfig()
        self._closed = False

    def __enter__(self) -> "RecognitionEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._closed = True

    def _recognize(self, bitmap: RasterBitmap) -> Optional[str]:
        text = self.recognizer.extract_text(bitmap)
        return text or None

    def _join_text(self, future: Future) -> Optional[str]:
        timeout = self.config.ocr.timeout_s
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError:
            future.cancel()
            logger.warning('Text recognition timed out after %.1fs; scoring on shape only', timeout)
        except Exception:
            logger.exception('Text recognition failed; scoring on shape only')
        return None

    def evaluate(self, user_bitmap: RasterBitmap, reference_bitmap: RasterBitmap,
                 expected_letter: str) -> RecognitionResult:
        if self._closed:
            raise RuntimeError('RecognitionEngine is closed')
        # fresh pool per call so a hung OCR thread from an earlier call
        # never holds the worker shape analysis needs
        pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix='recognition')
        try:
            text_future = pool.submit(self._recognize, user_bitmap)
            shape_future = pool.submit(analyze_shape, user_bitmap, reference_bitmap, self.config.shape)

            analysis = shape_future.result()
            recognized = self._join_text(text_future)
        finally:
            # don't block on an OCR call that already timed out
            pool.shutdown(wait=False, cancel_futures=True)

        text_score = compare_letters(recognized, expected_letter)
        score = fuse_scores(text_score, analysis, self.config.fusion)
        logger.info('Evaluated %r: recognized=%r text=%.2f shape=%.3f final=%.3f',
                    expected_letter, recognized, text_score, analysis.combined_score, score)
        return RecognitionResult(
            score=score,
            recognized_text=recognized,
            shape_analysis=analysis,
            text_score=text_score,
        )

    def submit(self, user_bitmap: RasterBitmap, reference_bitmap: RasterBitmap, expected_letter: str,
               callback: Callable[[RecognitionResult], None] | None = None) -> "Future[RecognitionResult]":
        """Non-blocking `evaluate`; `callback` receives the result on completion."""
        # evaluate blocks on the join; run it off the caller's thread
        runner = ThreadPoolExecutor(max_workers=1, thread_name_prefix='evaluation')
        future = runner.submit(self.evaluate, user_bitmap, reference_bitmap, expected_letter)
        runner.shutdown(wait=False)
        if callback is not None:
            def _done(f: Future) -> None:
                if f.exception() is None:
                    callback(f.result())
                else:
                    logger.error('Evaluation failed', exc_info=f.exception())
            future.add_done_callback(_done)
        return future


def evaluate(user_bitmap: RasterBitmap, reference_bitmap: RasterBitmap, expected_letter: str,
             recognizer=None, config: AppConfig | None = None) -> RecognitionResult:
    """One-shot evaluation with a default recognizer from `config`."""
    if recognizer is None:
        from NoorineTracer.services.ocr import create_recognizer
        recognizer = create_recognizer(config)
    with RecognitionEngine(recognizer, config) as engine:
        return engine.evaluate(user_bitmap, reference_bitmap, expected_letter)
