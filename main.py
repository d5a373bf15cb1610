import time
import uuid
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import List
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Response, status
from loguru import logger
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
import settings
from database import async_session_maker, engine, init_models
from data_context import ProductDataContext, get_product_context
from models import DEMO_PRODUCTS
from schemas import ProductCreate, ProductResponse, SearchResponse

SERVICE_NAME = settings.SERVICE_NAME

# Config logging JSON (niveaux INFO, WARNING, ERROR)
logger.remove()
logger.add(
    sink=settings.LOG_FILE,
    format="{time:YYYY-MM-DDTHH:mm:ss.SSSZ} | {level} | {message} | {extra}",
    level=settings.LOG_LEVEL,
    serialize=True,
    rotation="1 day",
)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "method", "endpoint", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["service", "method", "endpoint"]
)
ERROR_COUNT = Counter(
    "http_errors_total",
    "Total HTTP errors",
    ["service", "endpoint", "error_type"]
)
SEARCH_LATENCY = Histogram(
    "product_search_duration_seconds",
    "Duration of the product name query in seconds",
    ["service"]
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    await init_models()
    if settings.SEED_PRODUCTS:
        async with async_session_maker() as session:
            inserted = await ProductDataContext(session).seed(DEMO_PRODUCTS)
        logger.info(f"Seeded {inserted} demo products")
    logger.info(f"{SERVICE_NAME} started")
    try:
        yield
    finally:
        await engine.dispose()


app = FastAPI(title="Products Service", lifespan=lifespan)
router = APIRouter(prefix="/api/Product", tags=["products"])


def route_template(request: Request) -> str:
    """Label des métriques: le chemin déclaré de la route, jamais l'URL brute."""
    route = request.scope.get("route")
    return route.path if route is not None else "unmatched"


# Middleware pour logger les requests avec correlation ID
@app.middleware("http")
async def log_requests(request: Request, call_next):
    # Generate or propagate correlation ID (trace-id)
    trace_id = request.headers.get("X-Trace-ID", str(uuid.uuid4()))
    start_time = time.time()

    with logger.contextualize(trace_id=trace_id, service=SERVICE_NAME):
        logger.bind(method=request.method, url=str(request.url)).info(
            f"Request: {request.method} {request.url.path}"
        )

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["X-Trace-ID"] = trace_id
            return response
        finally:
            latency = time.time() - start_time
            endpoint = route_template(request)

            REQUEST_COUNT.labels(
                service=SERVICE_NAME,
                method=request.method,
                endpoint=endpoint,
                status=status_code
            ).inc()
            REQUEST_LATENCY.labels(
                service=SERVICE_NAME,
                method=request.method,
                endpoint=endpoint
            ).observe(latency)

            logger.bind(status=status_code, latency=latency).info(
                f"Response status: {status_code}"
            )


def not_found(product_id: int, endpoint: str) -> HTTPException:
    logger.warning(f"Product {product_id} not found")
    ERROR_COUNT.labels(service=SERVICE_NAME, endpoint=endpoint, error_type="not_found").inc()
    return HTTPException(status_code=404, detail="Product not found")


@app.get("/metrics")
async def metrics():
    """Endpoint /metrics compatible Prometheus"""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy", "service": SERVICE_NAME}


@router.get("/", response_model=List[ProductResponse], name="GetAllProducts")
async def get_all_products(db: ProductDataContext = Depends(get_product_context)):
    logger.info("Fetching all products")
    return await db.all()


@router.get("/search/{search}", response_model=SearchResponse, name="SearchAllProducts")
async def search_products(search: str, db: ProductDataContext = Depends(get_product_context)):
    logger.info(f"Searching products for [{search}]")
    started = time.perf_counter()
    products = await db.search_by_name(search)
    elapsed = time.perf_counter() - started
    SEARCH_LATENCY.labels(service=SERVICE_NAME).observe(elapsed)

    if products:
        message = f"{len(products)} Products found for [{search}]"
    else:
        message = f"No products found for [{search}]"
    logger.bind(elapsed=elapsed).info(message)
    return SearchResponse(
        products=[ProductResponse.model_validate(p) for p in products],
        response=message,
        elapsed_time=timedelta(seconds=elapsed),
    )


@router.get("/{id}", response_model=ProductResponse, name="GetProductById")
async def get_product(id: int, db: ProductDataContext = Depends(get_product_context)):
    logger.info(f"Fetching product {id}")
    product = await db.get(id)
    if product is None:
        raise not_found(id, "/api/Product/{id}")
    return product


@router.put("/{id}", name="UpdateProduct")
async def update_product(id: int, product: ProductCreate, db: ProductDataContext = Depends(get_product_context)):
    # L'Id du body est ignoré, seul celui du chemin compte
    logger.info(f"Updating product {id}")
    affected = await db.update(id, product.to_values())
    if affected != 1:
        raise not_found(id, "/api/Product/{id}")
    return Response(status_code=status.HTTP_200_OK)


@router.post("/", response_model=ProductResponse, status_code=status.HTTP_201_CREATED, name="CreateProduct")
async def create_product(
    product: ProductCreate,
    response: Response,
    db: ProductDataContext = Depends(get_product_context),
):
    logger.info(f"Creating product: {product.name}")
    created = await db.add(product.to_values())
    response.headers["Location"] = f"/api/Product/{created.id}"
    logger.info(f"Product created with ID {created.id}")
    return created


@router.delete("/{id}", name="DeleteProduct")
async def delete_product(id: int, db: ProductDataContext = Depends(get_product_context)):
    logger.info(f"Deleting product {id}")
    affected = await db.delete(id)
    if affected != 1:
        raise not_found(id, "/api/Product/{id}")
    return Response(status_code=status.HTTP_200_OK)


app.include_router(router)


if __name__ == "__main__":
    logger.info(f"Starting Products Service on port {settings.PORT}")
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
