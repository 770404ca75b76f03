"""
Phylogenetic tree parsing and manipulation.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

_NAME_STOP = ",:();[ \t\n\r"


def find_newick_end(text: str) -> int:
    """
    Index of the semicolon that ends a Newick tree, or -1 if there is none.

    Semicolons inside quoted names and square-bracket comments are skipped.
    """
    quoted = False
    comment = False
    for pos, char in enumerate(text):
        if comment:
            comment = char != ']'
        elif char == "'":
            quoted = not quoted
        elif quoted:
            continue
        elif char == '[':
            comment = True
        elif char == ';':
            return pos
    return -1


@dataclass(eq=False)
class TreeNode:
    """
    Phylogenetic tree node.

    Attributes
    ----------
    id : int
        Node identifier (preorder index, root is 0)
    name : Optional[str]
        Node name (leaf name or internal label)
    parent : Optional[TreeNode]
        Parent node
    children : list[TreeNode]
        Child nodes
    branch_length : Optional[float]
        Branch length to parent, None when absent from the Newick text
    """

    id: int
    name: Optional[str] = None
    parent: Optional["TreeNode"] = None
    children: list["TreeNode"] = field(default_factory=list)
    branch_length: Optional[float] = None

    @property
    def is_leaf(self) -> bool:
        """Check if node is a leaf."""
        return len(self.children) == 0


@dataclass
class Tree:
    """
    Phylogenetic tree.

    Attributes
    ----------
    root : TreeNode
        Root node of the tree
    n_nodes : int
        Total number of nodes
    """

    root: TreeNode
    n_nodes: int

    @classmethod
    def from_newick(cls, newick_string: str) -> "Tree":
        """
        Parse Newick format tree string.

        Square-bracket comments are dropped, whitespace (including newlines)
        between tokens is ignored, and the tree must end with a semicolon.

        Parameters
        ----------
        newick_string : str
            Newick format tree

        Returns
        -------
        Tree
            Parsed tree

        Raises
        ------
        ValueError
            If the text is not a valid Newick tree

        Examples
        --------
        >>> tree = Tree.from_newick("((A:0.1,B:0.2):0.15,(C:0.3,D:0.1):0.05);")
        >>> tree.leaf_names
        ['A', 'B', 'C', 'D']
        """
        end = find_newick_end(newick_string)
        if end < 0:
            raise ValueError("Invalid Newick format: missing semicolon")
        newick = re.sub(r'\[[^\]]*\]', '', newick_string[:end]).strip()
        if not newick.strip():
            raise ValueError("Invalid Newick format: no tree found")

        counter = [0]

        def skip_whitespace(s: str, pos: int) -> int:
            while pos < len(s) and s[pos] in ' \t\n\r':
                pos += 1
            return pos

        def parse_node(s: str, start: int, parent: Optional[TreeNode]) -> tuple[TreeNode, int]:
            node = TreeNode(id=counter[0], parent=parent)
            counter[0] += 1
            pos = skip_whitespace(s, start)

            if pos < len(s) and s[pos] == '(':
                pos += 1
                while True:
                    child, pos = parse_node(s, pos, node)
                    node.children.append(child)
                    pos = skip_whitespace(s, pos)
                    if pos < len(s) and s[pos] == ',':
                        pos += 1
                        continue
                    if pos < len(s) and s[pos] == ')':
                        pos = skip_whitespace(s, pos + 1)
                        break
                    raise ValueError(f"Expected ',' or ')' at position {pos}")

            if pos < len(s) and s[pos] == "'":
                end = s.find("'", pos + 1)
                if end < 0:
                    raise ValueError(f"Unterminated quoted name at position {pos}")
                node.name = s[pos + 1:end]
                pos = end + 1
            else:
                name_start = pos
                while pos < len(s) and s[pos] not in _NAME_STOP:
                    pos += 1
                if pos > name_start:
                    node.name = s[name_start:pos]

            pos = skip_whitespace(s, pos)

            if pos < len(s) and s[pos] == ':':
                pos = skip_whitespace(s, pos + 1)
                length_start = pos
                while pos < len(s) and s[pos] not in ",() \t\n\r":
                    pos += 1
                try:
                    node.branch_length = float(s[length_start:pos])
                except ValueError:
                    raise ValueError(f"Invalid branch length: {s[length_start:pos]!r}")
                pos = skip_whitespace(s, pos)

            if node.is_leaf and not node.name:
                raise ValueError(f"Unnamed leaf at position {start}")
            return node, pos

        root, pos = parse_node(newick, 0, None)
        if skip_whitespace(newick, pos) != len(newick):
            raise ValueError(f"Unexpected text after tree at position {pos}")

        tree = cls(root=root, n_nodes=counter[0])
        names = tree.leaf_names
        if len(set(names)) != len(names):
            duplicates = sorted({n for n in names if names.count(n) > 1})
            raise ValueError(f"Duplicate leaf names: {', '.join(duplicates)}")
        return tree

    @classmethod
    def from_file(cls, filepath: Path | str) -> "Tree":
        """Read the first tree of a Newick file."""
        with open(filepath) as f:
            return cls.from_newick(f.read())

    @property
    def leaves(self) -> list[TreeNode]:
        """Leaf nodes in left-to-right order."""
        return [node for node in self.preorder() if node.is_leaf]

    @property
    def leaf_names(self) -> list[str]:
        """Names of leaf nodes in left-to-right order."""
        return [node.name for node in self.leaves]

    @property
    def n_leaves(self) -> int:
        return len(self.leaves)

    def leaf_name_set(self) -> frozenset[str]:
        """Unordered set of leaf names, used to compare trees."""
        return frozenset(self.leaf_names)

    def preorder(self) -> list[TreeNode]:
        """
        Return nodes in pre-order traversal (root first).

        Returns
        -------
        list[TreeNode]
            Nodes in pre-order
        """
        result = []
        stack = [self.root]
        while stack:
            node = stack.pop()
            result.append(node)
            stack.extend(reversed(node.children))
        return result

    def postorder(self) -> list[TreeNode]:
        """
        Return nodes in post-order traversal (leaves to root).

        Returns
        -------
        list[TreeNode]
            Nodes in post-order
        """
        result = []

        def traverse(node: TreeNode) -> None:
            for child in node.children:
                traverse(child)
            result.append(node)

        traverse(self.root)
        return result

    def get_branches(self) -> list[tuple[TreeNode, TreeNode]]:
        """
        Get all branches as (parent, child) pairs, parents before children.

        Returns
        -------
        list[tuple[TreeNode, TreeNode]]
            List of (parent, child) tuples for each branch
        """
        return [(node.parent, node) for node in self.preorder() if node.parent is not None]

    def total_length(self) -> float:
        """Sum of all branch lengths (missing lengths count as 0)."""
        return sum(child.branch_length or 0.0 for _, child in self.get_branches())

    def tag_node_ids(self) -> "Tree":
        """
        Label every node with its id, in place.

        Leaves are renamed ``<id>_<name>`` and internal nodes get their id as
        label, so that simulated sequences can be matched to tree positions.

        Returns
        -------
        Tree
            self, for chaining
        """
        for node in self.preorder():
            if node.is_leaf:
                node.name = f"{node.id}_{node.name}"
            else:
                node.name = str(node.id)
        return self

    def to_newick(self) -> str:
        """
        Format the tree as a Newick string.

        Returns
        -------
        str
            Newick text terminated by a semicolon
        """

        def format_node(node: TreeNode) -> str:
            text = ""
            if node.children:
                text = "(" + ",".join(format_node(child) for child in node.children) + ")"
            if node.name:
                text += node.name
            if node.branch_length is not None:
                text += f":{node.branch_length:g}"
            return text

        return format_node(self.root) + ";"

    def write(self, filepath: Path | str) -> None:
        """Write the tree to a Newick file."""
        with open(filepath, 'w') as f:
            f.write(self.to_newick() + '\n')
