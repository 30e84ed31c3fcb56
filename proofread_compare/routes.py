"""
Proofread Comparison Flask Routes
=================================
API endpoints exposing the comparison engine.

The engine accepts any text; this layer enforces input shape, size limits
and per-client rate limits before calling it.
"""

import time
from functools import wraps
from typing import Tuple

from flask import Blueprint, request, jsonify, g

from config_logging import (
    VERSION,
    CompareError,
    ProcessingError,
    RateLimitError,
    StructuredLogger,
    ValidationError,
    get_config,
    get_logger,
    get_rate_limiter,
)

from .differ import ProofreadDiffer, compare_side_by_side, compare_texts

logger = get_logger('proofread_compare.routes')

pc_blueprint = Blueprint('proofread_compare', __name__)

SLOW_CALL_SECONDS = 5.0


# =============================================================================
# STANDARDIZED ERROR HANDLING DECORATOR
# =============================================================================

def _error_response(code: str, message: str, status_code: int):
    return jsonify({
        'success': False,
        'error': {
            'code': code,
            'message': message,
            'correlation_id': getattr(g, 'correlation_id', 'unknown')
        }
    }), status_code


def handle_pc_errors(f):
    """
    Decorator for standardized API error handling in comparison routes.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        start_time = time.time()
        try:
            result = f(*args, **kwargs)

            elapsed = time.time() - start_time
            if elapsed > SLOW_CALL_SECONDS:
                logger.warning(f"Slow comparison API call: {f.__name__} took {elapsed:.1f}s")

            return result

        except ValidationError as e:
            logger.warning(f"Validation error in {f.__name__}: {e}")
            return _error_response(e.code, e.message, e.status_code)
        except CompareError as e:
            logger.error(f"Processing error in {f.__name__}: {e}")
            return _error_response(e.code, e.message, e.status_code)
        except Exception as e:
            logger.exception(f"Unexpected error in {f.__name__}: {e}")
            return _error_response('INTERNAL_ERROR', 'An unexpected error occurred', 500)

    return decorated


# =============================================================================
# REQUEST HOOKS
# =============================================================================

@pc_blueprint.before_request
def assign_correlation_id():
    """Tag each request so its log lines can be grouped."""
    g.correlation_id = request.headers.get('X-Correlation-ID') or StructuredLogger.new_correlation_id()
    StructuredLogger.set_correlation_id(g.correlation_id)


@pc_blueprint.before_request
def enforce_rate_limit():
    """Reject clients that exceed the configured request rate."""
    if request.method in ('GET', 'HEAD', 'OPTIONS'):
        return None

    config = get_config()
    if not config.rate_limit_enabled:
        return None

    limiter = get_rate_limiter()
    client = request.remote_addr or 'unknown'
    if limiter.is_allowed(client):
        return None

    error = RateLimitError(retry_after=limiter.get_retry_after(client))
    logger.warning(f"Rate limit exceeded for {client}", **error.details)
    response, status = _error_response(error.code, error.message, error.status_code)
    response.headers['Retry-After'] = str(error.details['retry_after'])
    return response, status


# =============================================================================
# INPUT HELPERS
# =============================================================================

def _require_texts(first: str, second: str) -> Tuple[str, str]:
    """
    Pull two text fields from the JSON body.

    Raises:
        ValidationError: body is not a JSON object, a field is missing or not
            a string, or a text exceeds the configured size limit
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    limit = get_config().max_text_chars
    texts = []
    for name in (first, second):
        value = data.get(name)
        if value is None:
            raise ValidationError(f"{name} is required", field=name)
        if not isinstance(value, str):
            raise ValidationError(f"{name} must be a string", field=name)
        if len(value) > limit:
            raise ValidationError(
                f"{name} exceeds the maximum length of {limit} characters",
                field=name, length=len(value)
            )
        texts.append(value)
    return texts[0], texts[1]


def _run_engine(stage: str, func, *args):
    """
    Call into the comparison engine.

    Raises:
        ProcessingError: the engine failed; the original exception is chained
    """
    try:
        return func(*args)
    except Exception as e:
        raise ProcessingError(f"Comparison failed during {stage}", stage=stage) from e


# =============================================================================
# API ENDPOINTS
# =============================================================================

@pc_blueprint.route('/diff', methods=['POST'])
@handle_pc_errors
def compute_diff():
    """
    Annotate source_text against target_text.

    Request body:
        { source_text: str, target_text: str }

    Returns:
        {
            success: true,
            diff: {
                content_type,
                line_diffs: [ { range, line_number, is_different, status, word_diffs } ],
                stats: { total_lines, unchanged, modified, deleted, word_diffs }
            }
        }
    """
    source_text, target_text = _require_texts('source_text', 'target_text')
    result = _run_engine('diff', compare_texts, source_text, target_text)

    return jsonify({
        'success': True,
        'diff': result.to_dict()
    })


@pc_blueprint.route('/side-by-side', methods=['POST'])
@handle_pc_errors
def compute_side_by_side():
    """
    Annotate both panes of a side-by-side view.

    Request body:
        { original_text: str, revised_text: str }

    Returns:
        { success: true, comparison: { left: {...}, right: {...} } }
    """
    original_text, revised_text = _require_texts('original_text', 'revised_text')
    comparison = _run_engine('side-by-side', compare_side_by_side, original_text, revised_text)

    return jsonify({
        'success': True,
        'comparison': comparison.to_dict()
    })


@pc_blueprint.route('/similarity', methods=['POST'])
@handle_pc_errors
def compute_similarity():
    """
    Score two single lines with the metric chosen for source_text.

    Request body:
        { source_text: str, target_text: str }

    Returns:
        { success: true, similarity, content_type, threshold, is_match }
    """
    source_text, target_text = _require_texts('source_text', 'target_text')
    differ = _run_engine('classification', ProofreadDiffer, source_text, target_text)
    similarity = _run_engine('similarity', differ.scorer.similarity, source_text, target_text)

    return jsonify({
        'success': True,
        'similarity': similarity,
        'content_type': differ.content_type,
        'threshold': differ.scorer.threshold,
        'is_match': similarity >= differ.scorer.threshold
    })


@pc_blueprint.route('/health', methods=['GET'])
def health_check():
    """Service liveness probe."""
    return jsonify({
        'success': True,
        'status': 'ok',
        'version': VERSION
    })
