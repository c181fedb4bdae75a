"""
Automation flows: a node/edge graph that is edited and displayed.

Simulation is cosmetic. It marks every node as running for a fixed period so
a client can animate the canvas; nodes are never executed.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

from storage.models import AutomationEdge, AutomationFlow, AutomationNode, NodeData, NodePosition, NodeType
from storage.store import LocalStore

SIMULATION_DURATION_MS = 3000
DEFAULT_NODE_POSITION = NodePosition(x=200, y=300)


class FlowNotFound(LookupError):
    pass


async def _get_flow(flow_id: str, store: LocalStore) -> AutomationFlow:
    for flow in await store.get_flows():
        if flow.id == flow_id:
            return flow
    raise FlowNotFound(f"Flow {flow_id} not found")


async def create_flow_service(name: str, store: LocalStore) -> AutomationFlow:
    flow = AutomationFlow(id=str(uuid.uuid4()), name=name, active=True)
    return await store.save_flow(flow)


async def add_node_service(
    flow_id: str,
    node_type: NodeType,
    store: LocalStore,
    label: str = "New Node",
    position: Optional[NodePosition] = None,
    config: Optional[Dict[str, Any]] = None,
) -> AutomationFlow:
    flow = await _get_flow(flow_id, store)
    node = AutomationNode(
        id=str(uuid.uuid4()),
        type=node_type,
        position=position or DEFAULT_NODE_POSITION.model_copy(),
        data=NodeData(label=label, config=config),
    )
    flow.nodes.append(node)
    return await store.save_flow(flow)


async def add_edge_service(flow_id: str, source: str, target: str, store: LocalStore) -> AutomationFlow:
    """Connect two existing nodes. Unknown endpoints raise ValueError."""
    flow = await _get_flow(flow_id, store)
    node_ids = {node.id for node in flow.nodes}
    if source not in node_ids or target not in node_ids:
        raise ValueError("Edge endpoints must be nodes of this flow.")
    if source == target:
        raise ValueError("A node cannot connect to itself.")

    edge_id = f"e{source}-{target}"
    if not any(edge.id == edge_id for edge in flow.edges):
        flow.edges.append(AutomationEdge(id=edge_id, source=source, target=target))
    return await store.save_flow(flow)


async def remove_node_service(flow_id: str, node_id: str, store: LocalStore) -> AutomationFlow:
    """Remove a node together with every edge touching it."""
    flow = await _get_flow(flow_id, store)
    if not any(node.id == node_id for node in flow.nodes):
        raise FlowNotFound(f"Node {node_id} not found")
    flow.nodes = [node for node in flow.nodes if node.id != node_id]
    flow.edges = [edge for edge in flow.edges if node_id not in (edge.source, edge.target)]
    return await store.save_flow(flow)


async def simulate_flow_service(flow_id: str, store: LocalStore) -> Dict[str, Any]:
    """Cosmetic run descriptor; the stored flow is not modified."""
    flow = await _get_flow(flow_id, store)
    nodes = [
        node.model_copy(update={"data": node.data.model_copy(update={"status": "running"})})
        for node in flow.nodes
    ]
    return {
        "flow_id": flow.id,
        "simulating": True,
        "duration_ms": SIMULATION_DURATION_MS,
        "nodes": nodes,
        "edges": flow.edges,
    }
