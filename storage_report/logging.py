import logging
import os

from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.http._log_exporter import OTLPLogExporter
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.resources import Resource

from storage_report.config import LoggingConfig, config

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)-15s::%(levelname)s::%(name)s::%(message)s"


def otlp_resource(log_conf: LoggingConfig) -> Resource:
    """Resource attached to every exported log record of a report run."""
    return Resource.create(
        {
            "service.name": log_conf.service_name,
            "service.instance.id": os.uname().nodename,
        }
    )


def getOpenTelemetryLoggingHandler(log_conf: LoggingConfig):
    """Handler exporting the run's diagnostics, None when no endpoint is set."""
    if log_conf.OTLP_endpoint is None:
        return None
    logger_provider = LoggerProvider(resource=otlp_resource(log_conf))
    logger_provider.add_log_record_processor(
        BatchLogRecordProcessor(OTLPLogExporter(log_conf.OTLP_endpoint))
    )
    set_logger_provider(logger_provider)
    return LoggingHandler(level=logging.NOTSET, logger_provider=logger_provider)


def setupLogging(verbose_level: int = 0):
    verbose_levels = {1: logging.INFO, 2: logging.DEBUG}

    logging_levels = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    conf = config()
    if conf.logging:
        config_log_level = logging_levels.get(conf.logging.log_level, logging.WARNING)
        # verbose priority:
        # in 0 (not specified in command line) then config log level is used
        # otherwise, command-line verbose level is used
        log_level = verbose_levels.get(verbose_level, config_log_level)

        ot_handler = getOpenTelemetryLoggingHandler(conf.logging)

        formatter = logging.Formatter(LOG_FORMAT)

        # The report owns stdout, every diagnostic goes to stderr
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        console_handler.setLevel(logging.NOTSET)

        if ot_handler is not None:
            ot_handler.setFormatter(formatter)
            ot_handler.setLevel(logging.NOTSET)

        root_logger = logging.getLogger()
        root_logger.handlers.clear()

        if ot_handler is not None:
            root_logger.addHandler(ot_handler)
        root_logger.addHandler(console_handler)

        root_logger.setLevel(log_level)

        logger.debug("setupLogging done")

    else:
        # no logging section in config file
        logging.basicConfig(
            handlers=[logging.StreamHandler()],
            format=LOG_FORMAT,
            level=verbose_levels.get(verbose_level, logging.WARNING),
        )
