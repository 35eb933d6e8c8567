"""
Detached Node Rendering.

Converts LibCST nodes to source text "in vacuum", without serialising the
whole module. Used for member rendering and import deduplication signatures.
"""

import libcst as cst

# A dummy module used as a context to render detached nodes.
_RENDER_CTX = cst.parse_module("")


def capture_node_source(node: cst.CSTNode) -> str:
  """
  Renders a LibCST node into its Python source code string representation.

  This handles both parsed nodes (which carry whitespace info) and
  constructed nodes (detached from any tree).

  Args:
      node: The CST node to serialise.

  Returns:
      str: The Python code string.
  """
  return _RENDER_CTX.code_for_node(node)
