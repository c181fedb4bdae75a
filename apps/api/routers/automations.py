"""Automation flow editor router."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field

from routers.dependencies import get_store
from services.automation import (
    FlowNotFound,
    add_edge_service,
    add_node_service,
    create_flow_service,
    remove_node_service,
    simulate_flow_service,
)
from storage.models import AutomationEdge, AutomationFlow, AutomationNode, NodePosition, NodeType
from storage.store import LocalStore

router = APIRouter()


class CreateFlowRequest(BaseModel):
    name: str = Field(min_length=1)


class AddNodeRequest(BaseModel):
    type: NodeType
    label: str = "New Node"
    position: Optional[NodePosition] = None
    config: Optional[Dict[str, Any]] = None


class AddEdgeRequest(BaseModel):
    source: str
    target: str


class SimulationResponse(BaseModel):
    flow_id: str
    simulating: bool
    duration_ms: int
    nodes: List[AutomationNode]
    edges: List[AutomationEdge]


@router.get("", response_model=List[AutomationFlow])
async def list_flows(store: LocalStore = Depends(get_store)):
    return await store.get_flows()


@router.post("", response_model=AutomationFlow, status_code=201)
async def create_flow(request: CreateFlowRequest, store: LocalStore = Depends(get_store)):
    return await create_flow_service(request.name, store)


@router.delete("/{flow_id}", status_code=204)
async def delete_flow(flow_id: str, store: LocalStore = Depends(get_store)):
    if not await store.delete_flow(flow_id):
        raise HTTPException(status_code=404, detail="Flow not found")
    return Response(status_code=204)


@router.post("/{flow_id}/nodes", response_model=AutomationFlow)
async def add_node(flow_id: str, request: AddNodeRequest, store: LocalStore = Depends(get_store)):
    try:
        return await add_node_service(
            flow_id,
            request.type,
            store,
            label=request.label,
            position=request.position,
            config=request.config,
        )
    except FlowNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.delete("/{flow_id}/nodes/{node_id}", response_model=AutomationFlow)
async def remove_node(flow_id: str, node_id: str, store: LocalStore = Depends(get_store)):
    try:
        return await remove_node_service(flow_id, node_id, store)
    except FlowNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.post("/{flow_id}/edges", response_model=AutomationFlow)
async def add_edge(flow_id: str, request: AddEdgeRequest, store: LocalStore = Depends(get_store)):
    try:
        return await add_edge_service(flow_id, request.source, request.target, store)
    except FlowNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("/{flow_id}/simulate", response_model=SimulationResponse)
async def simulate(flow_id: str, store: LocalStore = Depends(get_store)):
    """Every node marked running for a fixed period. Nothing is executed."""
    try:
        return await simulate_flow_service(flow_id, store)
    except FlowNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
