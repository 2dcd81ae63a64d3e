"""Test-prep platform: test-taking sessions over a question-set backend."""
