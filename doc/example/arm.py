""" A minimal robot process: publishes its joint state, follows joint
    commands, and asks the operator before moving the gripper.
"""

import logging
import time

import rrc
from rrc.protocol import messages


def main():

    logging.basicConfig(level=logging.INFO)

    robot = rrc.start(heartbeat_latency=0.2)
    robot.setup_heartbeat_callback(0.2, lost)

    robot.init_robot_name('arm')
    robot.init_controllable_joints(messages.JointState(names=['shoulder', 'elbow']))
    robot.init_simple_actions(messages.SimpleActions(actions=[messages.SimpleAction(name='gripper', state=1.0)]))

    positions = [0.0, 0.0]

    try:
        while True:
            command, fresh = robot.get_joints_command()
            if fresh and len(command.positions) == len(positions):
                positions = list(command.positions)

            action, fresh = robot.get_simple_action_command()
            if fresh and action.name == 'gripper':
                request = messages.PermissionRequest(description='close the gripper?')
                pending = robot.request_permission(request)
                if pending.wait(timeout=10):
                    logging.info('gripper set to %.1f', action.state)
                else:
                    pending.cancel()

            robot.set_joint_state(messages.JointState(names=['shoulder', 'elbow'], positions=positions))
            time.sleep(0.05)

    except KeyboardInterrupt:
        pass

    robot.close()


def lost(overdue):
    logging.warning('controller lost, heartbeat %.2f sec overdue', overdue)


if __name__ == '__main__':
    main()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
