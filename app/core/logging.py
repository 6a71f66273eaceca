"""
日志配置
"""
import logging
import colorlog


def configure_logging(level: str = "INFO") -> None:
    """配置彩色控制台日志"""
    root = logging.getLogger("app")
    if any(getattr(h, "_newsroom_handler", False) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler._newsroom_handler = True
    formatter = colorlog.ColoredFormatter(
        "%(log_color)s[%(asctime)s] %(levelname)-8s%(reset)s %(blue)s%(name)s%(reset)s %(message)s",
        datefmt="%H:%M:%S",
        reset=True,
        log_colors={
            'DEBUG':    'cyan',
            'INFO':     'green',
            'WARNING':  'yellow',
            'ERROR':    'red',
            'CRITICAL': 'red,bg_white',
        },
        style='%'
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)
    root.setLevel(level.upper())
