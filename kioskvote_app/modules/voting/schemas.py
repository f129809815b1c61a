from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence

from kioskvote_app.core.error_handlers import ValidationError


def validate_keys(raw_keys: Any, known_items: Sequence[str], expected: int = 3) -> List[str]:
    """Return ``raw_keys`` as a list of ``expected`` distinct, known item keys."""
    if not isinstance(raw_keys, list) or not all(isinstance(k, str) for k in raw_keys):
        raise ValidationError('keys must be a list of strings', errors={'keys': 'invalid type'})
    if len(raw_keys) != expected:
        raise ValidationError(
            f'Exactly {expected} items must be chosen',
            errors={'keys': f'expected {expected}, got {len(raw_keys)}'},
        )
    if len(set(raw_keys)) != len(raw_keys):
        raise ValidationError('Chosen items must be distinct', errors={'keys': 'duplicate'})
    unknown = [k for k in raw_keys if k not in known_items]
    if unknown:
        raise ValidationError('Unknown items chosen', errors={'keys': unknown})
    return list(raw_keys)


def validate_language(raw_language: Any, languages: Sequence[str]) -> str:
    if raw_language not in languages:
        raise ValidationError('Unsupported language', errors={'language': raw_language})
    return raw_language


def validate_submission_id(raw_id: Any, required: bool = True) -> Optional[str]:
    if raw_id is None and not required:
        return None
    if not isinstance(raw_id, str) or not raw_id.strip() or len(raw_id) > 64:
        raise ValidationError('submission_id must be a non-empty string', errors={'submission_id': raw_id})
    # Used as a directory name under the results folder
    if not all(ch.isalnum() or ch in '-_' for ch in raw_id):
        raise ValidationError('submission_id contains invalid characters', errors={'submission_id': raw_id})
    return raw_id


@dataclass
class VoteRequestDTO:
    keys: List[str]
    language: str
    submission_id: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]], known_items: Sequence[str],
                     languages: Sequence[str], expected: int = 3) -> 'VoteRequestDTO':
        if not isinstance(payload, Mapping):
            raise ValidationError('Request body must be a JSON object')
        return cls(
            keys=validate_keys(payload.get('keys'), known_items, expected),
            language=validate_language(payload.get('language'), languages),
            submission_id=validate_submission_id(payload.get('submission_id'), required=False),
        )

