# Minimal print based logger. Every line is tagged with a short
# context marker so the console output can be scanned by eye:
#   (DD) debug   (--) info   (WW) warning   (EE) error
#   (II) input   (NV) navigator   (HH) hints   (+K/-K) grab/ungrab

VERBOSE = False


def log(*args, ctx="--"):
    print(f"({ctx})", *args, flush=True)


def debug(*args, ctx="DD"):
    if not VERBOSE:
        return
    # allow a bare debug() call to print a separator line
    if not args:
        print("", flush=True)
        return
    log(*args, ctx=ctx)


def info(*args, ctx="--"):
    log(*args, ctx=ctx)


def warn(*args, ctx="WW"):
    log(*args, ctx=ctx)


def error(*args, ctx="EE"):
    log(*args, ctx=ctx)
