"""
Rules package.

Defines the rule model, storage and evaluation used by the evaluator.

Modules of interest:
- models: Effects, operations, rule entries and caller protocols.
- table: Lazily created resource -> role -> privilege rule storage.
- editor: Normalization of rule arguments and add/remove operations.
- resolver: Resource ancestry walk and role depth-first search.
"""
