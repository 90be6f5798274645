from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.memory_attendance_reader import MemoryAttendanceReader
from .attendance.mysql_attendance_reader import MySQLAttendanceReader
from .attendance.repository import AttendanceReader
from .attendance.service import AttendanceService
from .cancellations.memory_cancellation_repository import MemoryCancellationRepository
from .cancellations.mysql_cancellation_repository import MySQLCancellationRepository
from .cancellations.repository import CancellationRepository
from .cancellations.service import CancellationService
from .caterings.memory_catering_repository import MemoryCateringRepository
from .caterings.mysql_catering_repository import MySQLCateringRepository
from .caterings.repository import CateringRepository
from .caterings.service import CateringService
from .common.datetime_utils import Clock, now_local
from .core.enums import StoreBackend
from .database.connection import DBConfig, DatabaseConnection
from .database.memory_store import MemoryStore
from .groups.memory_group_repository import MemoryGroupRepository
from .groups.mysql_group_repository import MySQLGroupRepository
from .groups.repository import GroupRepository
from .groups.service import GroupService
from .students.memory_student_repository import MemoryStudentRepository
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    backend: StoreBackend

    caterings_repo: CateringRepository
    groups_repo: GroupRepository
    students_repo: StudentRepository
    cancellations_repo: CancellationRepository
    attendance_reader: AttendanceReader

    catering_service: CateringService
    group_service: GroupService
    student_service: StudentService
    cancellation_service: CancellationService
    attendance_service: AttendanceService


def build_container(
    *,
    backend: "StoreBackend | str" = StoreBackend.MEMORY,
    db_config: Optional[dict] = None,
    store: Optional[MemoryStore] = None,
    clock: Clock = now_local,
) -> Container:
    backend = StoreBackend(backend)

    if backend == StoreBackend.MYSQL:
        if not db_config:
            raise ValueError("DB_CONFIG is required for the mysql backend")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        caterings_repo = MySQLCateringRepository(conn)
        groups_repo = MySQLGroupRepository(conn)
        students_repo = MySQLStudentRepository(conn)
        cancellations_repo = MySQLCancellationRepository(conn)
        attendance_reader = MySQLAttendanceReader(conn)
    else:
        store = store or MemoryStore()
        caterings_repo = MemoryCateringRepository(store)
        groups_repo = MemoryGroupRepository(store)
        students_repo = MemoryStudentRepository(store)
        cancellations_repo = MemoryCancellationRepository(store)
        attendance_reader = MemoryAttendanceReader(store)

    catering_service = CateringService(caterings_repo)
    group_service = GroupService(groups_repo, caterings_repo)
    student_service = StudentService(students_repo, groups_repo, caterings_repo)
    cancellation_service = CancellationService(
        cancellations_repo,
        caterings_repo,
        students_repo,
        groups_repo,
        clock=clock,
    )
    attendance_service = AttendanceService(attendance_reader, groups_repo)

    return Container(
        backend=backend,
        caterings_repo=caterings_repo,
        groups_repo=groups_repo,
        students_repo=students_repo,
        cancellations_repo=cancellations_repo,
        attendance_reader=attendance_reader,
        catering_service=catering_service,
        group_service=group_service,
        student_service=student_service,
        cancellation_service=cancellation_service,
        attendance_service=attendance_service,
    )
