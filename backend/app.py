from __future__ import annotations
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import logging

from logging_setup import setup_logging
from settings import load_settings
from schemas import (
    AvailabilityRequest, CatalogFacets, CatalogResponse, ChatRequest, ChatResponse,
    FilterRequest, PreviewRequest, ProductsResponse,
)
from services.catalog_loader import load_catalog
from services.filter_engine import apply_filters, facet_availability, find_products_matching_any_chip
from agent.agent import Agent, build_generator

settings = load_settings()
setup_logging(settings.log_level)
log = logging.getLogger(__name__)

app = FastAPI(title="AI Commerce Filter Agent")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins, allow_credentials=False,
    allow_methods=["*"], allow_headers=["*"]
)

# Bootstrap
agent = Agent(
    products=load_catalog(settings.catalog_path),
    generator=build_generator(settings),
    history_window=settings.history_window,
    preview_limit=settings.preview_limit,
)


@app.get("/api/catalog", response_model=CatalogResponse)
def get_catalog():
    return CatalogResponse(items=agent.products)


@app.get("/api/facets", response_model=CatalogFacets)
def get_facets():
    return agent.facets


@app.post("/api/reload")
def reload_catalog():
    facets = agent.reload(load_catalog(settings.catalog_path))
    log.info(f"CATALOG_RELOADED | products={len(agent.products)}")
    return {"ok": True, "products": len(agent.products), "subcategories": len(facets.subcategories)}


@app.post("/api/filter", response_model=ProductsResponse)
def filter_products(req: FilterRequest):
    items = apply_filters(agent.products, req.filters)
    return ProductsResponse(count=len(items), items=items)


@app.post("/api/preview", response_model=ProductsResponse)
def preview_products(req: PreviewRequest):
    items = find_products_matching_any_chip(agent.products, req.chips)
    return ProductsResponse(count=len(items), items=items[:max(req.limit, 0)])


@app.post("/api/availability")
def availability(req: AvailabilityRequest):
    return {"availability": facet_availability(agent.products, agent.facets, req.filters, req.selected_chips)}


async def _turn(req: ChatRequest, regenerate: bool) -> ChatResponse:
    if not req.message.strip():
        raise HTTPException(status_code=400, detail="Message is required")
    return await agent.chat(req, regenerate=regenerate)


@app.post("/api/chat", response_model=ChatResponse)
async def chat(req: ChatRequest):
    return await _turn(req, regenerate=False)


@app.post("/api/chat/alternatives", response_model=ChatResponse)
async def chat_alternatives(req: ChatRequest):
    return await _turn(req, regenerate=True)
