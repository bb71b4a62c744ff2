"""Requisition reference generation"""

import uuid


def generate_reference() -> str:
    """Fresh reference for a requisition; the API rejects duplicates per account"""
    return uuid.uuid4().hex
