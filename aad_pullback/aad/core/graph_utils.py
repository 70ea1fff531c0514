"""
Tape inspection helpers
Print and analyse the structure of a recorded tape
"""

import numpy as np
import pandas as pd
from typing import Dict, List
from collections import Counter

from .values import kind_of


def _fan_outs(tape) -> List[int]:
    """Number of downstream uses of every slot on the tape."""
    fan_outs = [0] * len(tape.values)
    for node in tape.nodes:
        for slot in node.parents:
            if slot is not None:
                fan_outs[slot] += 1
    return fan_outs


def get_tape_stats(tape) -> Dict:
    """
    Collect tape statistics (no printing)

    Returns:
        dict with node/edge counts, fan-in/fan-out and operation breakdown
    """
    if not tape.nodes:
        return {
            'nodes': 0,
            'edges': 0,
            'inputs': len(tape.inputs),
            'max_fan_in': 0,
            'avg_fan_in': 0.0,
            'max_fan_out': 0,
            'avg_fan_out': 0.0,
            'fan_out_slots': 0,
            'operations': {}
        }

    n_nodes = len(tape.nodes)
    # constants are not edges of the graph
    fan_ins = [sum(slot is not None for slot in node.parents) for node in tape.nodes]
    n_edges = sum(fan_ins)

    fan_outs = _fan_outs(tape)
    op_counter = Counter(node.op_tag for node in tape.nodes)

    return {
        'nodes': n_nodes,
        'edges': n_edges,
        'inputs': len(tape.inputs),
        'max_fan_in': max(fan_ins),
        'avg_fan_in': float(np.mean(fan_ins)),
        'max_fan_out': max(fan_outs),
        'avg_fan_out': float(np.mean(fan_outs)),
        # slots whose cotangent is a sum over several paths
        'fan_out_slots': sum(1 for n in fan_outs if n > 1),
        'operations': dict(op_counter)
    }


def print_tape_summary(tape, detailed: bool = False) -> Dict:
    """
    Print a summary of the tape

    Args:
        tape: Tape object
        detailed: also print one line per node (first 100 nodes)

    Returns:
        the statistics dictionary from get_tape_stats()
    """
    if not tape.nodes:
        print("Empty tape")
        return get_tape_stats(tape)

    stats = get_tape_stats(tape)
    n_nodes = stats['nodes']

    print("\n" + "="*70)
    print("TAPE SUMMARY")
    print("="*70)
    print(f"Total nodes:        {n_nodes:,}")
    print(f"Total edges:        {stats['edges']:,}")
    print(f"Inputs:             {stats['inputs']}")
    print(f"Max fan-in:         {stats['max_fan_in']}")
    print(f"Avg fan-in:         {stats['avg_fan_in']:.2f}")
    print(f"Max fan-out:        {stats['max_fan_out']}")
    print(f"Avg fan-out:        {stats['avg_fan_out']:.2f}")
    print(f"Fan-out slots:      {stats['fan_out_slots']}")
    print()
    print("Operation breakdown:")
    for op_type, count in Counter(stats['operations']).most_common(10):
        pct = 100.0 * count / n_nodes
        print(f"  {op_type:12s}: {count:6,} ({pct:5.1f}%)")

    if detailed:
        print()
        print("="*70)
        print("DETAILED NODE LIST (first 100 nodes)")
        print("="*70)
        for i, node in enumerate(tape.nodes[:100]):
            parent_info = ", ".join(
                "const" if slot is None else f"slot{slot}" for slot in node.parents
            )
            print(f"Node {i:3d}: {node.op_tag:12s} <- [{parent_info}] -> slot{node.out}")

    print("="*70 + "\n")
    return stats


def tape_table(tape) -> pd.DataFrame:
    """
    One row per recorded node: position, operation, operand slots,
    output slot, output kind and output value.
    """
    rows = []
    for i, node in enumerate(tape.nodes):
        out_val = tape.values[node.out]
        rows.append({
            'node': i,
            'op': node.op_tag,
            'parents': node.parents,
            'out': node.out,
            'kind': kind_of(out_val).value,
            'value': out_val,
        })
    return pd.DataFrame(rows, columns=['node', 'op', 'parents', 'out', 'kind', 'value'])
