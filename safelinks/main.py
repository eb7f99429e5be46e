import logging
from urllib.parse import urlsplit

from fastapi import BackgroundTasks, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError

from safelinks import config, crud, database, notify, pages, qr_utils, reports, schemas, shortener
from safelinks.errors import NotFoundError, SafeLinksError, StoreError
from safelinks.resolver import State, resolve
from safelinks.validator import is_valid_code

# --- Logging ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)
logger = logging.getLogger("safelinks")

app = FastAPI(
    title="SafeLinks",
    description="Shorten URLs and redirect visitors without becoming an open redirector.",
    version="1.0.0",
)

# --- CORS (allow frontend dev servers, etc.) ---
origins = ["*"] if config.ENVIRONMENT == "dev" else [
    config.PUBLIC_BASE_URL or "http://localhost:8000",
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

NO_REFERRER = {"Referrer-Policy": "no-referrer"}
TRUTHY = {"1", "true", "yes"}


def public_base(request: Request) -> str:
    return config.PUBLIC_BASE_URL or str(request.base_url).rstrip("/")


def own_domain(request: Request) -> str | None:
    return urlsplit(public_base(request)).hostname


# ---------- Error handling ----------
@app.exception_handler(SafeLinksError)
def handle_safelinks_error(request: Request, exc: SafeLinksError):
    body = {"error": exc.message}
    reason = getattr(exc, "reason", None)
    if reason:
        body["reason"] = reason
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(SQLAlchemyError)
def handle_store_error(request: Request, exc: SQLAlchemyError):
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": StoreError.message})


@app.exception_handler(RequestValidationError)
def handle_bad_body(request: Request, exc: RequestValidationError):
    fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
    message = f"Missing or invalid field(s): {', '.join(fields)}" if fields else "Invalid request body"
    return JSONResponse(status_code=400, content={"error": message})


# Health check (useful for uptime monitors & load balancers)
@app.get("/health", include_in_schema=False)
def health():
    return {"status": "ok", "env": config.ENVIRONMENT}


# Small config for frontend to know public base URL
@app.get("/config", include_in_schema=False)
def get_config(request: Request):
    return {"public_base_url": public_base(request)}


# ---------- API ----------
@app.post("/api/shorten", response_model=schemas.ShortenOut, responses={400: {"model": schemas.ErrorOut}})
def shorten(body: schemas.ShortenIn, request: Request, db=Depends(database.get_db)):
    result = shortener.shorten(
        db,
        body.originalUrl,
        own_domain=own_domain(request),
    )
    link = result.link
    return {
        "originalUrl": link.original_url,
        "code": link.code,
        "shortUrl": f"{public_base(request)}/{link.code}",
        "existing": result.existing,
    }


@app.post("/api/report", response_model=schemas.MessageOut, responses={400: {"model": schemas.ErrorOut}, 404: {"model": schemas.ErrorOut}})
def report(body: schemas.ReportIn, request: Request, background_tasks: BackgroundTasks, db=Depends(database.get_db)):
    filed = reports.file_report(db, body.code, body.reason)
    # Runs after the response is sent; a failed notification cannot fail the report
    background_tasks.add_task(
        notify.report_filed, filed.url_code, f"{public_base(request)}/{filed.url_code}", filed.reason,
    )
    return {"message": "Report submitted. Thank you for helping keep links safe."}


@app.get("/api/link-count", response_model=schemas.LinkCount)
def link_count(db=Depends(database.get_db)):
    return {"count": crud.count_urls(db)}


@app.get("/api/links/{code}", response_model=schemas.LinkInfo, responses={404: {"model": schemas.ErrorOut}})
def link_info(code: str, request: Request, db=Depends(database.get_db)):
    link = crud.find_by_code(db, code) if is_valid_code(code, config.CODE_LENGTH) else None
    if not link:
        raise NotFoundError()
    return {
        "code": link.code,
        "originalUrl": link.original_url,
        "shortUrl": f"{public_base(request)}/{link.code}",
        "createdAt": link.created_at,
        "reported": crud.has_reports(db, code),
    }


@app.get("/api/qr/{code}", response_model=schemas.QrOut, responses={404: {"model": schemas.ErrorOut}})
def qr_code(code: str, request: Request, db=Depends(database.get_db)):
    link = crud.find_by_code(db, code) if is_valid_code(code, config.CODE_LENGTH) else None
    if not link:
        raise NotFoundError()
    return {"qr_base64": qr_utils.short_url_qr_base64(f"{public_base(request)}/{link.code}")}


# Short link /{code}
@app.get("/{code}", include_in_schema=False)
def visit(code: str, confirmed: str | None = Query(None), db=Depends(database.get_db)):
    if code in shortener.RESERVED_CODES or not is_valid_code(code, config.CODE_LENGTH):
        return HTMLResponse(pages.render_not_found(code), status_code=404, headers=NO_REFERRER)

    resolution = resolve(
        db,
        code,
        confirmed=(confirmed or "").lower() in TRUTHY,
        strict_external=config.STRICT_EXTERNAL_REDIRECTS,
        trusted_hosts=config.TRUSTED_HOSTS,
    )
    if resolution.state is State.UNKNOWN:
        return HTMLResponse(pages.render_not_found(code), status_code=404, headers=NO_REFERRER)

    target = resolution.link.original_url
    if resolution.redirects:
        logger.info("Redirecting %s (%s)", code, resolution.state.value)
        return RedirectResponse(url=target, status_code=302, headers=NO_REFERRER)

    logger.info("Showing warning for %s (%s)", code, resolution.state.value)
    html = pages.render_warning(code, target, reported=resolution.state is State.REPORTED)
    return HTMLResponse(html, status_code=200, headers=NO_REFERRER)
