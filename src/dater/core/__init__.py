"""Core domain package for dater.

Core contains the triage orchestration, decision, match and stats logic
without any platform or storage-specific code, keeping the business logic
portable.
"""
