"""
Libraries that are expected to be present on every target system and
therefore must not be copied into the AppDir when deploying the
dependencies of Qt plugins, based on the AppImage excludelist.
"""

from os.path import basename as os_path_basename

EXCLUDED_LIBRARIES = frozenset(
    [
        "ld-linux.so.2",
        "ld-linux-x86-64.so.2",
        "libanl.so.1",
        "libasound.so.2",
        "libBrokenLocale.so.1",
        "libc.so.6",
        "libcidn.so.1",
        "libcom_err.so.2",
        "libdl.so.2",
        "libdrm.so.2",
        "libEGL.so.1",
        "libexpat.so.1",
        "libfontconfig.so.1",
        "libfreetype.so.6",
        "libfribidi.so.0",
        "libgbm.so.1",
        "libgcc_s.so.1",
        "libgdk_pixbuf-2.0.so.0",
        "libgio-2.0.so.0",
        "libglapi.so.0",
        "libGLdispatch.so.0",
        "libglib-2.0.so.0",
        "libGL.so.1",
        "libGLX.so.0",
        "libgmodule-2.0.so.0",
        "libgobject-2.0.so.0",
        "libgpg-error.so.0",
        "libharfbuzz.so.0",
        "libICE.so.6",
        "libjack.so.0",
        "libm.so.6",
        "libmvec.so.1",
        "libnss_compat.so.2",
        "libnss_dns.so.2",
        "libnss_files.so.2",
        "libnss_hesiod.so.2",
        "libnss_nis.so.2",
        "libnss_nisplus.so.2",
        "libOpenGL.so.0",
        "libp11-kit.so.0",
        "libpthread.so.0",
        "libresolv.so.2",
        "librt.so.1",
        "libSM.so.6",
        "libstdc++.so.6",
        "libthai.so.0",
        "libthread_db.so.1",
        "libusb-1.0.so.0",
        "libutil.so.1",
        "libuuid.so.1",
        "libX11.so.6",
        "libX11-xcb.so.1",
        "libxcb.so.1",
        "libxcb-dri2.so.0",
        "libxcb-dri3.so.0",
        "libz.so.1",
    ]
)

# QtWebEngine cannot work with the host's NSS when it differs from the
# version Chromium was built against, so these always get bundled
ALWAYS_BUNDLED_PREFIXES = (
    "libfreebl3.so",
    "libnss3.so",
    "libnssutil3.so",
    "libsmime3.so",
    "libsoftokn3.so",
    "libssl3.so",
)


def is_excluded_library(library_path: str) -> bool:
    library_name = os_path_basename(library_path)

    if not library_name:
        return True

    if library_name.startswith(ALWAYS_BUNDLED_PREFIXES):
        return False

    if library_name in EXCLUDED_LIBRARIES:
        return True

    # e.g. "libc.so.6.1" is covered by "libc.so.6"
    return any(library_name.startswith(excluded + ".") for excluded in EXCLUDED_LIBRARIES)
