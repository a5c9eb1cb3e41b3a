"""
Host maintenance workflow: settings, confirmation gate, state checkers and
the ordered maintenance stages.
"""
