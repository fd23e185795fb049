"""Email header analyzer: parse raw headers and decode Microsoft security headers."""
from .analyzer import analyze_header_set
from .canonical import CanonicalHeader, Direction
from .codes import bcl_meaning, compound_auth_reason, header_category, scl_meaning
from .decoders import (
    AuthResult,
    decode_authentication_results,
    decode_forefront_antispam_report,
    decode_microsoft_antispam,
    decode_original_authentication_results,
)
from .errors import ConfigError, HeaderAnalyzerError, InvalidArgumentError
from .index import header_identity
from .parser import HeaderSet, build_header_set, parse_header_source
from .tokenizer import HeaderRecord, sanitise_header_value, tokenize

__all__ = [
    'AuthResult',
    'CanonicalHeader',
    'ConfigError',
    'Direction',
    'HeaderAnalyzerError',
    'HeaderRecord',
    'HeaderSet',
    'InvalidArgumentError',
    'analyze_header_set',
    'bcl_meaning',
    'build_header_set',
    'compound_auth_reason',
    'decode_authentication_results',
    'decode_forefront_antispam_report',
    'decode_microsoft_antispam',
    'decode_original_authentication_results',
    'header_category',
    'header_identity',
    'parse_header_source',
    'sanitise_header_value',
    'scl_meaning',
    'tokenize',
]
