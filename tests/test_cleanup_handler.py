"""
Tests for the ENI cleanup handler.
"""

import asyncio
import unittest

import pulumi
import pulumi_command as command

from eni_status.cleanup_handler import (
    ENICleanupComponent,
    ENICleanupOptions,
    _generate_cleanup_script,
    attach_eni_cleanup_handler,
    build_cleanup_command,
    register_eni_cleanup_handler,
)


# Mocks for Pulumi testing
class PulumiMocks(pulumi.runtime.Mocks):
    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        return [args.name + '_id', args.inputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        return {}


class TestCleanupScript(unittest.TestCase):
    def test_build_cleanup_command(self):
        cmd = build_cleanup_command("us-west-2", executable="/usr/bin/python3")
        self.assertEqual(cmd, "/usr/bin/python3 -m eni_status --delete --region us-west-2")

    def test_build_cleanup_command_with_profile_and_dry_run(self):
        cmd = build_cleanup_command("us-east-1", profile="ops team", dry_run=True, executable="python")
        self.assertEqual(
            cmd,
            "python -m eni_status --delete --region us-east-1 --profile 'ops team' --dry-run",
        )

    def test_script_covers_every_region(self):
        script = _generate_cleanup_script(["us-east-1", "eu-west-1"], executable="python")
        self.assertTrue(script.startswith("#!/bin/bash\n"))
        self.assertIn("if ! python -m eni_status --delete --region us-east-1; then", script)
        self.assertIn("if ! python -m eni_status --delete --region eu-west-1; then", script)
        self.assertTrue(script.rstrip().endswith("exit $failed"))


class TestENICleanupHandler(unittest.TestCase):
    def setUp(self):
        # Other test modules may have run asyncio.run and closed the current loop
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self.addCleanup(asyncio.set_event_loop, None)
        self.addCleanup(loop.close)
        # Drop the root stack registered on a previous test's (now closed) loop
        pulumi.runtime.settings.ROOT.set(None)
        pulumi.runtime.set_mocks(PulumiMocks(), preview=False)

    @pulumi.runtime.test
    def test_register_eni_cleanup_handler(self):
        """register_eni_cleanup_handler creates a command that cleans up on delete."""
        dummy_resource = pulumi.CustomResource("custom:resource:Dummy", "dummy")

        cleanup_command = register_eni_cleanup_handler("dummy", dummy_resource, ["us-east-1"])

        self.assertIsInstance(cleanup_command, command.local.Command)

        def check(args):
            create, delete = args
            self.assertEqual(create, "echo 'ENI cleanup handler attached'")
            self.assertIn("-m eni_status --delete --region us-east-1", delete)

        return pulumi.Output.all(cleanup_command.create, cleanup_command.delete).apply(check)

    @pulumi.runtime.test
    def test_attach_passes_options(self):
        dummy_resource = pulumi.CustomResource("custom:resource:Dummy", "dummy-attach")

        cleanup_command = attach_eni_cleanup_handler("dummy-attach", dummy_resource, ENICleanupOptions(
            regions=["ap-south-1"],
            profile="ops",
            dry_run=True,
        ))

        def check(delete):
            self.assertIn("--region ap-south-1 --profile ops --dry-run", delete)

        return cleanup_command.delete.apply(check)

    def test_attach_disabled(self):
        self.assertIsNone(attach_eni_cleanup_handler("unused", None, ENICleanupOptions(disable_cleanup=True)))

    @pulumi.runtime.test
    def test_component_registers_handler(self):
        component = ENICleanupComponent("global", ENICleanupOptions(regions=["us-east-1", "us-west-2"]))

        self.assertIsInstance(component.cleanup_command, command.local.Command)

        def check(delete):
            self.assertIn("--region us-east-1", delete)
            self.assertIn("--region us-west-2", delete)

        return component.cleanup_command.delete.apply(check)

    @pulumi.runtime.test
    def test_component_handler_has_no_trigger_on_parent(self):
        component = ENICleanupComponent("no-cycle", ENICleanupOptions(regions=["us-east-1"]))

        def check(triggers):
            self.assertFalse(triggers)

        return component.cleanup_command.triggers.apply(check)

    @pulumi.runtime.test
    def test_attached_handler_triggers_on_resource_replace(self):
        dummy_resource = pulumi.CustomResource("custom:resource:Dummy", "dummy-trigger")

        cleanup_command = attach_eni_cleanup_handler("dummy-trigger", dummy_resource, ENICleanupOptions(
            regions=["us-east-1"],
        ))

        def check(triggers):
            self.assertEqual(len(triggers), 1)

        return cleanup_command.triggers.apply(check)

    @pulumi.runtime.test
    def test_component_uses_default_region(self):
        component = ENICleanupComponent("defaults")

        def check(delete):
            self.assertIn("--region us-east-1", delete)

        return component.cleanup_command.delete.apply(check)

    @pulumi.runtime.test
    def test_component_disabled(self):
        component = ENICleanupComponent("disabled", ENICleanupOptions(disable_cleanup=True))
        self.assertIsNone(component.cleanup_command)


if __name__ == '__main__':
    unittest.main()
