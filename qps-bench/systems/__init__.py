"""
Object storage backends for the QPS benchmark.
"""

from .base import ObjectStorageSystem
from .aws import S3System
from .r2 import R2System

__all__ = ['ObjectStorageSystem', 'S3System', 'R2System']
