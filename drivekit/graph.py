import html

from typing import Optional

from . import vt100
from .options import Group, Option, OptionTable
from .parsed import ParsedOptions


def options(table: OptionTable, parsed: Optional[ParsedOptions] = None):
    """
    Build a graph of the option catalog.

    Options are clustered by group and aliases point at the option they
    resolve to. When `parsed` is given, the options that occur in it are
    filled in.
    """
    from graphviz import Digraph  # type: ignore

    used = set()
    if parsed is not None:
        used = {p.option.spelling for p in parsed}

    g = Digraph("options", filename="options.gv")
    g.attr("graph", rankdir="LR", label="<<B>Option Catalog</B>>", labelloc="t")
    g.attr("node", shape="box")

    def node(target, option: Option):
        label = option.spelling
        if option.helpText:
            label = f"<<B>{html.escape(option.spelling)}</B><BR/>{vt100.wordwrap(html.escape(option.helpText), 30, newline='<BR/>')}>"

        if option.spelling in used:
            target.node(option.spelling, label, style="filled", fillcolor="lightblue")
        elif option.hidden:
            target.node(option.spelling, label, fontcolor="#999999")
        else:
            target.node(option.spelling, label)

    for option in table:
        if option.group is None:
            node(g, option)

    for group in Group:
        members = table.inGroup(group)
        if not members:
            continue

        cluster = Digraph(f"cluster_{group.value}")
        cluster.attr(label=group.value, style="rounded", color="grey")
        for option in members:
            node(cluster, option)
        g.subgraph(cluster)

    for option in table:
        if option.alias is not None:
            g.edge(option.spelling, option.alias.spelling, style="dashed", arrowhead="empty")

    return g
