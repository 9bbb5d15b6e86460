"""Helpful utilities for managing demultiplexing output directories.
"""
import os
import shutil
import time

import toolz as tz


def safe_makedir(dname):
    """Make a directory if it doesn't exist, handling concurrent race conditions.
    """
    if not dname:
        return dname
    num_tries = 0
    max_tries = 5
    while not os.path.exists(dname):
        # we could get an error here if multiple lanes are creating
        # the directory at the same time
        try:
            os.makedirs(dname)
        except OSError:
            if num_tries > max_tries:
                raise
            num_tries += 1
            time.sleep(2)
    return dname

def remove_safe(f):
    try:
        if os.path.isdir(f):
            shutil.rmtree(f)
        else:
            os.remove(f)
    except OSError:
        pass

def copy_path(orig, new):
    """Copy a file or a whole directory tree, merging into existing directories.

    Returns the kind of object copied ("dir" or "file"), or None when the
    source is neither.
    """
    if os.path.isdir(orig):
        shutil.copytree(orig, new, dirs_exist_ok=True)
        return "dir"
    elif os.path.isfile(orig):
        safe_makedir(os.path.dirname(new))
        shutil.copyfile(orig, new)
        return "file"
    return None

def get_in(d, t, default=None):
    """
    look up if you can get a tuple of values from a nested dictionary,
    each item in the tuple a deeper layer

    example: get_in({1: {2: 3}}, (1, 2)) -> 3
    example: get_in({1: {2: 3}}, (2, 3)) -> None
    """
    return tz.get_in(t, d, default)

def lane_key(lane):
    """Comparable key for a lane identifier: integer lanes compare numerically.
    """
    lane = str(lane).strip()
    try:
        return int(lane)
    except ValueError:
        return lane
