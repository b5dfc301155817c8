"""
The run-time: environments, values, and the statement/expression evaluator.
"""
