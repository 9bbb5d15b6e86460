"""Run scoped state shared by the lanes of one demultiplexing run.
"""
import collections
import os
import threading

from bcldemux import utils
from bcldemux.illumina import machine
from bcldemux.illumina.samplesheet import PROJECT

ProjectDir = collections.namedtuple("ProjectDir", ["project", "run_id"])

class RunOutcome(collections.namedtuple("RunOutcome", ["lane", "status", "message", "stage",
                                                       "returncode", "log_file"])):
    """Terminal result of a lane: skipped, rejected, succeeded or failed.
    """
    __slots__ = ()
    SKIPPED = "skipped"
    REJECTED = "rejected"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @classmethod
    def skipped(cls, lane):
        return cls(lane, cls.SKIPPED, "Omitting lane %s" % lane, None, None, None)

    @classmethod
    def rejected(cls, lane, message):
        return cls(lane, cls.REJECTED, message, None, None, None)

    @classmethod
    def succeeded(cls, lane, log_file):
        return cls(lane, cls.SUCCEEDED, "Finished lane %s" % lane, None, 0, log_file)

    @classmethod
    def failed(cls, lane, stage, returncode, log_file, message=None):
        if message is None:
            message = "%s process exited with code %s" % (stage, returncode)
        return cls(lane, cls.FAILED, message, stage, returncode, log_file)

    @property
    def ok(self):
        return self.status in (self.SKIPPED, self.SUCCEEDED)

    def __str__(self):
        return "Lane %s %s: %s" % (self.lane, self.status, self.message)

class RunContext:
    """Directories, run id and output directory registry for a single run.

    The run id is read once from RunInfo.xml. Project output directories are
    registered under a lock since lanes complete on worker threads.
    """
    def __init__(self, config, sheet=None):
        self.config = config
        self.sheet = sheet
        self.basecalls_dir = os.path.normpath(utils.get_in(config, ("dirs", "basecalls")))
        self.intensities_dir = machine.intensities_dir(self.basecalls_dir)
        self.run_id = machine.get_run_id(machine.run_info_file(self.basecalls_dir))
        self.output_dir = os.path.normpath(utils.get_in(config, ("dirs", "output")))
        self.tmp_dir = os.path.join(os.path.normpath(utils.get_in(config, ("dirs", "tmp"))),
                                    self.run_id)
        self.undetermined_dir = os.path.join(self.output_dir, "Undetermined", self.run_id)
        self.timeout = utils.get_in(config, ("algorithm", "timeout")) or None
        self._project_dirs = set()
        self._lock = threading.Lock()

    def project_dir(self, pdir):
        return os.path.join(self.output_dir, pdir.project, pdir.run_id)

    def add_project_dirs(self, rows):
        """Create output directories for the projects in rows, once per project.
        """
        with self._lock:
            for row in rows:
                pdir = ProjectDir(row[PROJECT], self.run_id)
                if pdir not in self._project_dirs:
                    utils.safe_makedir(self.project_dir(pdir))
                    self._project_dirs.add(pdir)

    def project_dirs(self):
        with self._lock:
            return sorted(self._project_dirs)

    def metrics_file(self, lane):
        return os.path.join(self.undetermined_dir, "demultiplex_metrics_%s.txt" % lane)
