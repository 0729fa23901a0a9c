"""
Constants and configuration values for releasesmith.

This module contains all hardcoded values, URLs, timeouts, and other constants
used throughout the application.
"""

# GitHub API URLs
GITHUB_API_BASE = "https://api.github.com/repos"
GITHUB_WEB_BASE = "https://github.com"
GITHUB_API_VERSION = "2022-11-28"

# Network timeouts (in seconds)
GITHUB_API_TIMEOUT = 30
ASSET_UPLOAD_TIMEOUT = 240
ASSET_DOWNLOAD_TIMEOUT = 240
DEFAULT_CHUNK_SIZE = 8192

# Workspace layout, relative to BASE_DIR
STAGING_DIR_NAME = "staging"
TEMPLATES_DIR_NAME = "templates"
RELEASES_DIR_NAME = "releases"

# Legacy delta-update ledger
LEDGER_FILE_NAME = "RELEASES"
FULL_PACKAGE_MARKER = "-full"
DELTA_PACKAGE_MARKER = "-delta"
NUPKG_EXTENSION = ".nupkg"
KEEP_DELTA_COUNT = 4

# Compiler invocation
DEFAULT_COMPILER = "dotnet"
COMPILE_CONFIGURATION = "Release"
DESKTOP_TARGET_FRAMEWORK = "net8.0"
ANDROID_TARGET_FRAMEWORK = "net8.0-android"
IOS_TARGET_FRAMEWORK = "net8.0-ios"
IOS_DISPLAY_VERSION = "1.0"

# Packaging tool (invoked as `<compiler> vpk ...`)
PACKAGER_SUBCOMMAND = "vpk"

# Application layout inside the staging area
APP_NAME = "osu!"
WINDOWS_EXECUTABLE = "osu!.exe"
MACOS_APP_BUNDLE = "osu!.app"
LINUX_APP_DIR = "osu!.AppDir"
LINUX_ENTRY_POINT = "AppRun"
MACOS_ENTITLEMENTS_FILE = "osu.entitlements"
DEFAULT_SPLASH_IMAGE = "lazer-velopack.jpg"
DEFAULT_LEGACY_ASSET_PREFIX = "osu"
DEFAULT_ANDROID_PACKAGE_ID = "sh.ppy.osulazer"
DEFAULT_IOS_ARTIFACT_NAME = "osu.iOS.ipa"

# Windows icon embedding
RCEDIT_PATH = "tools/rcedit-x64.exe"
WINE_COMMAND = "wine"
WINDOWS_TIMESTAMP_URL = "http://timestamp.comodoca.com"

# Alternate garbage collector payload
SATORI_GC_URL_TEMPLATE = (
    "https://github.com/ppy/Satori/releases/latest/download/{runtime_identifier}.zip"
)

# CI integration
APPVEYOR_COMMAND = "appveyor"

# Configuration
CONFIG_FILE_NAME = "deploy.yaml"
APP_DIRS_NAME = "releasesmith"
GITHUB_TOKEN_ENV_VAR = "GITHUB_TOKEN"

# Credential purposes
CODE_SIGNING_PURPOSE = "code-signing"

# Logging configuration
LOGGER_NAME = "releasesmith"
LOG_LEVEL_ENV_VAR = "RELEASESMITH_LOG_LEVEL"
DISABLE_FILE_LOGGING_ENV_VAR = "RELEASESMITH_DISABLE_FILE_LOGGING"
LOG_FILE_NAME = "releasesmith.log"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
INFO_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s: %(message)s"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_FILE_BACKUP_COUNT = 5

# Messages
MSG_FATAL_PREFIX = "FATAL ERROR: "
MSG_TRADEMARK_NOTICE = (
    "Please note that OSU! and PPY are registered trademarks and as such covered "
    "by trademark law. Do not distribute builds of this project publicly that make "
    "use of these."
)
