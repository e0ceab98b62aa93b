"""User prompt template for commit message generation.

The literal {{diff}} token is replaced with the filtered diff.
"""

DIFF_PLACEHOLDER = "{{diff}}"

USER_PROMPT_TEMPLATE = """[INPUT DIFF]
{{diff}}

[OUTPUT]"""
