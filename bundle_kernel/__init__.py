"""
Bundle Kernel

Staging, rollback and read reconciliation for versioned multi-record
bundles on a key-value document store:
- Version-tagged staged writes with lock bookkeeping
- Exact compensations for partially staged bundles
- Order-preserving merge of read results into bundle responses
"""

__version__ = "0.1.0"
