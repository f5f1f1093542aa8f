"""Android platform API levels referenced by the signature-algorithm catalog."""

from enum import IntEnum


class AndroidSdkVersion(IntEnum):
    """Android API levels (android.os.Build.VERSION_CODES)."""
    INITIAL_RELEASE = 1
    GINGERBREAD = 9
    HONEYCOMB = 11
    JELLY_BEAN_MR2 = 18
    KITKAT = 19
    LOLLIPOP = 21
    M = 23
    N = 24  # APK Signature Scheme v2
    O = 26
    P = 28  # APK Signature Scheme v3, fs-verity style content digests
    Q = 29
    R = 30  # APK Signature Scheme v4
    S = 31
    Sv2 = 32
    T = 33  # APK Signature Scheme v3.1
    U = 34
