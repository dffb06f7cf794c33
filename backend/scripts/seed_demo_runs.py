#!/usr/bin/env python
"""
Seed script for creating sample update history for dashboard development.
Run with: cd backend; python -m scripts.seed_demo_runs
The pipeline owns these tables in production; only use this against a dev database.
"""

import uuid
from datetime import date, datetime, timedelta

from terminology_reporting.database import Base, SessionLocal, engine
from terminology_reporting.models import TrudRelease, UpdateError, UpdateRun, UpdateStep


def seed(days: int = 14):
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        start = datetime(2026, 1, 1, 2, 0)
        for day in range(days):
            run_start = start + timedelta(days=day)
            failed = day % 5 == 4
            run = UpdateRun(
                run_id=uuid.uuid4(),
                start_time=run_start,
                end_time=run_start + timedelta(minutes=42),
                duration_seconds=42 * 60,
                success=not failed,
                updates_found=1 if day % 7 == 0 else 0,
                server_name='TERMSQL01',
                log_file_path=f'D:\\Logs\\TerminologyUpdate_{run_start:%Y%m%d}.log',
                whatif_mode=day == 0,
                forced_run=False,
            )
            db.add(run)
            db.add_all([
                UpdateStep(run_id=run.run_id, terminology_type='SNOMED', step_name='Check TRUD', step_order=1,
                           success=True, details='New release: no'),
                UpdateStep(run_id=run.run_id, terminology_type='SNOMED', step_name='Validate', step_order=2,
                           success=True, details='Version: 20251119, Concepts: 373,451, Descriptions: 1,512,004'),
                UpdateStep(run_id=run.run_id, terminology_type='DMD', step_name='Import', step_order=1,
                           success=not failed, details='Version: 5.2.0_20251229; VMPs: 24011; AMPs: 160234'),
                UpdateStep(run_id=run.run_id, terminology_type='DMD', step_name='Validate', step_order=2,
                           success=not failed, details='XML validation: 99.85; SNOMED validation: 98.7'),
            ])
            if failed:
                db.add(UpdateError(
                    run_id=run.run_id,
                    error_source='DMD Import',
                    error_message='Bulk insert into dmd.vmp timed out',
                    error_timestamp=run_start + timedelta(minutes=30),
                ))

        db.add_all([
            TrudRelease(item_name='SNOMED', trud_item_number=101, release_id='uk_sct2cl_41.0.0_20251119000001Z',
                        release_date=date(2025, 11, 19), detected_date=datetime(2025, 11, 20, 2, 5),
                        downloaded_date=datetime(2025, 11, 20, 2, 15), imported_date=datetime(2025, 11, 20, 2, 50),
                        import_success=True),
            TrudRelease(item_name='dm+d', trud_item_number=24, release_id='nhsbsa_dmd_5.2.0_20251229000001',
                        release_date=date(2025, 12, 29), detected_date=datetime(2025, 12, 30, 2, 5)),
        ])
        db.commit()
        print(f"Seeded {days} runs")
    finally:
        db.close()


if __name__ == '__main__':
    seed()
