import logging

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from mapping_validator.datamodel.requests import (
    FormatJsonRequest,
    ParseShapeRequest,
    ValidateMappingRequest,
)
from mapping_validator.datamodel.responses import (
    EntityMappingResult,
    FormatJsonResponse,
    HealthCheckResponse,
    ParseShapeResponse,
)
from mapping_validator.formatter import compress_json, format_json
from mapping_validator.mapping.orchestrator import validate_mapping
from mapping_validator.mapping.shape_parser import parse_target_fields
from mapping_validator.settings import mapping_validator_settings

# Load local env vars if present
load_dotenv()


# Colored level names, since our records are interleaved with Uvicorn's
class ColoredLogFormatter(logging.Formatter):
    COLOR_CODES = {
        logging.DEBUG: "\033[94m",  # Blue
        logging.INFO: "\033[92m",  # Green
        logging.WARNING: "\033[93m",  # Yellow
        logging.ERROR: "\033[91m",  # Red
        logging.CRITICAL: "\033[95m",  # Magenta
    }
    RESET_CODE = "\033[0m"

    def format(self, record):
        color = self.COLOR_CODES.get(record.levelno, "")
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET_CODE}"
        return super().format(record)


logging.basicConfig(
    level=mapping_validator_settings.log_level.upper(),
    format="%(levelname)s:\t%(asctime)s - %(name)s - %(message)s",
    datefmt="%H:%M:%S",
)

# Override the formatter with the custom ColoredLogFormatter
root_logger = logging.getLogger()
for handler in root_logger.handlers:
    if handler.formatter:
        handler.setFormatter(ColoredLogFormatter(handler.formatter._fmt))

_log = logging.getLogger(__name__)


##################################
# App creation and configuration #
##################################

app = FastAPI(title="Mapping Validator")

app.add_middleware(
    CORSMiddleware,
    allow_origins=mapping_validator_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


#############################
# API Endpoints definitions #
#############################


@app.get("/health")
def health() -> HealthCheckResponse:
    return HealthCheckResponse()


@app.post("/v1/mapping/validate")
def validate(request: ValidateMappingRequest) -> EntityMappingResult:
    size = len(request.document.encode("utf-8"))
    if size > mapping_validator_settings.max_document_size:
        raise HTTPException(
            status_code=413,
            detail=(
                f"Document is {size} bytes, the limit is "
                f"{mapping_validator_settings.max_document_size} bytes."
            ),
        )

    if request.class_definition is not None:
        target_fields = parse_target_fields(request.class_definition)
    else:
        target_fields = request.fields

    _log.info(
        "Validating %s document against %d declared fields",
        request.format.value,
        len(target_fields),
    )
    return validate_mapping(
        request.document,
        target_fields,
        document_format=request.format,
        collection=request.collection,
    )


@app.post("/v1/mapping/shape")
def parse_shape(request: ParseShapeRequest) -> ParseShapeResponse:
    return ParseShapeResponse(fields=parse_target_fields(request.class_definition))


@app.post("/v1/format/json")
def format_json_text(request: FormatJsonRequest) -> FormatJsonResponse:
    try:
        if request.compact:
            result = compress_json(request.text)
        else:
            result = format_json(request.text, indent=request.indent)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid JSON: {exc}") from exc
    return FormatJsonResponse(result=result)
